import logging
import logging.config
import os


def setup_logging(log_dir: str = "logs", environment: str = None):
    """Setup centralized logging configuration for the application"""

    os.makedirs(log_dir, exist_ok=True)
    environment = environment or os.getenv("ENVIRONMENT", "development")

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            },
            "simple": {
                "format": "%(levelname)s - %(message)s"
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": "INFO",
                "formatter": "simple",
                "stream": "ext://sys.stdout"
            },
            "file_info": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": "INFO",
                "formatter": "detailed",
                "filename": os.path.join(log_dir, "app_info.log"),
                "maxBytes": 10485760,  # 10MB
                "backupCount": 5
            },
            "file_error": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": "ERROR",
                "formatter": "detailed",
                "filename": os.path.join(log_dir, "app_error.log"),
                "maxBytes": 10485760,  # 10MB
                "backupCount": 5
            },
            "file_debug": {
                "class": "logging.handlers.RotatingFileHandler",
                "level": "DEBUG",
                "formatter": "detailed",
                "filename": os.path.join(log_dir, "app_debug.log"),
                "maxBytes": 10485760,  # 10MB
                "backupCount": 3
            }
        },
        "loggers": {
            "": {
                "level": "INFO",
                "handlers": ["console", "file_info", "file_error"]
            },
            "app": {
                "level": "DEBUG",
                "handlers": ["console", "file_info", "file_error", "file_debug"],
                "propagate": False
            },
            "uvicorn": {
                "level": "INFO",
                "handlers": ["console", "file_info"],
                "propagate": False
            },
            "sqlalchemy.engine": {
                "level": "WARNING",
                "handlers": ["file_info"],
                "propagate": False
            }
        }
    }

    logging.config.dictConfig(logging_config)

    if environment != "development":
        logging.getLogger("app").setLevel(logging.INFO)

    logger = logging.getLogger(__name__)
    logger.info("Logging configuration initialized successfully")
    logger.info(f"Environment: {environment}")
    logger.info(f"Log files will be written to: {os.path.abspath(log_dir)}")

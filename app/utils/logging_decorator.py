import inspect
import logging
from functools import wraps
from typing import Optional, Callable

from app.services.logging_service import LoggingService

# Activity logging decorators for service methods.
# A decorated method must live on an object exposing a ``db`` session and must
# accept a ``user_id`` argument; the acting user is read from that argument.
# Client ``ip_address`` and ``user_agent`` are read off the object when present.

logger = logging.getLogger(__name__)


def log_activity(
    action: str,
    description: Optional[str] = None,
    table_name: Optional[str] = None,
    get_record_id: Optional[Callable] = None,
    get_details: Optional[Callable] = None
):
    """
    Decorator to record an activity after a service method succeeds

    Args:
        action: Action type (CREATE, UPDATE, DELETE, JOIN, etc.)
        description: Custom description or callable that returns description
        table_name: Table name affected by the action
        get_record_id: Function to extract record ID from (result, arguments)
        get_details: Function to extract additional details from (result, arguments)
    """

    def decorator(func: Callable) -> Callable:
        signature = inspect.signature(func)

        @wraps(func)
        def wrapper(self, *args, **kwargs):
            result = func(self, *args, **kwargs)

            db = getattr(self, "db", None)
            try:
                bound = signature.bind(self, *args, **kwargs)
                bound.apply_defaults()
                arguments = bound.arguments
                user_id = arguments.get("user_id")

                if db is None or user_id is None:
                    logger.debug(f"Skipping activity log for {func.__name__}: no session or user")
                    return result

                final_description = description
                if callable(description):
                    try:
                        final_description = description(result, arguments)
                    except Exception as e:
                        logger.warning(f"Failed to generate description: {e}")
                        final_description = None

                record_id = None
                if get_record_id:
                    try:
                        record_id = get_record_id(result, arguments)
                    except Exception as e:
                        logger.warning(f"Failed to extract record ID: {e}")

                details = None
                if get_details:
                    try:
                        details = get_details(result, arguments)
                    except Exception as e:
                        logger.warning(f"Failed to extract details: {e}")

                LoggingService.log_activity(
                    db=db,
                    user_id=user_id,
                    action=action,
                    description=final_description or LoggingService.get_action_description(action, table_name or "record"),
                    table_name=table_name,
                    record_id=record_id,
                    details=details,
                    ip_address=getattr(self, "ip_address", None),
                    user_agent=getattr(self, "user_agent", None)
                )

            except Exception as e:
                # The business operation already committed; only the audit row is lost
                logger.error(f"Failed to log activity for {func.__name__}: {e}")
                if db is not None:
                    db.rollback()

            return result

        return wrapper

    return decorator


def extract_id_from_result(result, arguments):
    """Extract ID from function result"""
    return getattr(result, 'id', None)


def extract_argument(name: str) -> Callable:
    """Build an extractor returning one of the call's own arguments"""
    def extractor(result, arguments):
        return arguments.get(name)
    return extractor


def log_create(table_name: str, description: Optional[str] = None):
    """
    Decorator for CREATE operations

    Usage:
        @log_create("prayer_requests", "Created prayer request")
        def create_prayer_request(self, user_id, data):
            return created_item
    """
    return log_activity(
        action="CREATE",
        description=description,
        table_name=table_name,
        get_record_id=extract_id_from_result
    )


def log_update(table_name: str, description: Optional[str] = None):
    """Decorator for UPDATE operations"""
    return log_activity(
        action="UPDATE",
        description=description,
        table_name=table_name,
        get_record_id=extract_id_from_result
    )


def log_delete(table_name: str, id_argument: str, description: Optional[str] = None):
    """
    Decorator for DELETE operations; the deleted record's id comes from the
    named argument since deletes return nothing useful
    """
    return log_activity(
        action="DELETE",
        description=description,
        table_name=table_name,
        get_record_id=extract_argument(id_argument)
    )

"""
Helpers shared by the product use cases.
"""
from internal.domain.errors import AppError
from internal.domain.events import ProductEvent
from pkg.logger.logger import get_logger
from pkg.result import Failure, fail

from .ports import EventPublisher


logger = get_logger(__name__)


def collaborator_failure(error: Exception, fallback_message: str, **context) -> Failure:
    """
    Convert an exception raised by a store or publisher into a failed Result.

    Infrastructure faults are reported with the VALIDATION code, carrying
    the underlying message; the exception class goes into details.

    Args:
        error: The raised exception.
        fallback_message: Message used when the exception has none.
        **context: Extra fields for the log record.

    Returns:
        Failure with a VALIDATION AppError.
    """
    logger.exception(fallback_message, error=str(error), **context)
    return fail(AppError.validation(
        str(error) or fallback_message,
        details={"cause": type(error).__name__},
    ))


async def publish_event(publisher: EventPublisher, topic: str, event: ProductEvent) -> None:
    """
    Publish a product event.

    Args:
        publisher: Event publisher port.
        topic: Destination topic.
        event: Event to serialize and send.
    """
    await publisher.publish(topic, event.to_json())
    logger.debug(
        "Product event published",
        topic=topic,
        event_type=event.type.value,
        product_id=event.product_id,
    )

"""HTTP handlers for Toggl Track lookups."""

from coverly_api.dto import BookHoursRequest, BookHoursResponse
from coverly_api.errors import GatewayError
from coverly_api.services import TimeTrackingService

from .error_mapping import to_http_exception


class TimeTrackingHandler:
    """HTTP handlers for the /toggl endpoints."""

    def __init__(self, time_tracking_service: TimeTrackingService) -> None:
        self._toggl = time_tracking_service

    async def get_book_hours(self, request: BookHoursRequest) -> BookHoursResponse:
        """Handle GET /toggl/books requests.

        Raises:
            HTTPException: Status of the classified error
        """
        try:
            hours = await self._toggl.find_book_hours(request.title)
        except GatewayError as e:
            raise to_http_exception(e) from e

        return BookHoursResponse(hours=hours)

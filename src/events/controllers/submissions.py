from uuid import UUID

from django.db.models import QuerySet
from ninja import Query
from ninja_extra import api_controller, route, status
from ninja_extra.pagination import PageNumberPaginationExtra, PaginatedResponseSchema, paginate
from ninja_extra.searching import Searching, searching

from common.auth_base import AdminAuth
from common.controllers import UserAwareController
from common.schema import ValidationErrorResponse
from events import filters, models, schema
from events.service import catalog_service


@api_controller("/submissions", tags=["Submissions"])
class SubmissionController(UserAwareController):
    """Promoter submissions and their moderation.

    Anyone can submit an event; everything else is reserved to admins.
    """

    @route.post(
        "/",
        url_name="submit_event",
        response={201: schema.SubmissionSchema, 400: ValidationErrorResponse},
    )
    def submit_event(self, payload: schema.EventSubmissionSchema) -> tuple[int, models.Event]:
        """Submit an event for approval. It stays pending until an admin decides."""
        return status.HTTP_201_CREATED, catalog_service.submit_event(payload)

    @route.get(
        "/",
        url_name="list_submissions",
        response=PaginatedResponseSchema[schema.SubmissionSchema],
        auth=AdminAuth(),
    )
    @paginate(PageNumberPaginationExtra, page_size=20)
    @searching(
        Searching, search_fields=["name", "location", "promoter_first_name", "promoter_last_name", "business_name"]
    )
    def list_submissions(
        self,
        params: filters.SubmissionFilterSchema = Query(...),  # type: ignore[type-arg]
    ) -> QuerySet[models.Event]:
        """All submissions, newest first."""
        return params.filter(catalog_service.list_submissions())

    @route.patch(
        "/{event_id}/status",
        url_name="set_submission_status",
        response=schema.SubmissionSchema,
        auth=AdminAuth(),
    )
    def set_status(self, event_id: UUID, payload: schema.EventStatusUpdateSchema) -> models.Event:
        """Approve or deny a pending submission."""
        return catalog_service.set_status(event_id, payload.status, actor=self.user())

    @route.put(
        "/{event_id}",
        url_name="update_submission",
        response={200: schema.SubmissionSchema, 400: ValidationErrorResponse},
        auth=AdminAuth(),
    )
    def update_submission(self, event_id: UUID, payload: schema.EventSubmissionSchema) -> models.Event:
        """Edit an event's details, capacity and price list."""
        return catalog_service.update_event(event_id, payload)

    @route.delete("/{event_id}", url_name="delete_submission", response={204: None}, auth=AdminAuth())
    def delete_submission(self, event_id: UUID) -> tuple[int, None]:
        """Delete an event. Refuse while it still has active tickets."""
        catalog_service.delete_event(event_id)
        return 204, None

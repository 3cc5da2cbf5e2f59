"""
ListingService - listing lifecycle and moderation.

State machine: every listing starts ``pending``; moderators and admins move it
between ``approved`` and ``rejected`` (re-moderation allowed), and an approved
listing can be marked ``sold`` by its owner or staff. Owners never change the
status themselves; they may only edit the price, mark sold or delete.

Every status change is a single conditional UPDATE so concurrent decisions on
the same listing resolve to exactly one of them.
"""

from typing import Any, Dict, Optional

from django.db import transaction

from infrastructure.container import container
from infrastructure.notifications import LISTINGS_CATALOG, LISTINGS_OWNER, LISTINGS_PENDING
from infrastructure.observability import get_tracer
from marketplace.catalog.domain.inputs import (
    CONTENT_FIELDS,
    ListingContentPatchSerializer,
    ListingDraftSerializer,
    PriceSerializer,
)
from marketplace.catalog.domain.metadata import parse_metadata, requires_images
from marketplace.catalog.domain.models import Listing, ListingStatus
from marketplace.catalog.domain.repositories import ListingRepository, ReferenceValidator
from marketplace.domain.events import (
    listing_created,
    listing_deleted,
    listing_moderated,
    listing_sold,
    listing_updated,
)
from marketplace.infra.observability.metrics import (
    authorization_denials_total,
    listing_moderation_decisions_total,
    listing_transitions_rejected_total,
    listings_created_total,
    listings_deleted_total,
    listings_sold_total,
    moderation_decision_duration,
    pending_queue_size,
)
from utils.pagination import marketplace_setting, paginate
from utils.rbac import (
    Principal,
    can_edit_content,
    can_manage_listing,
    can_moderate,
    can_view_listing,
    require_not_banned,
    require_staff,
)
from utils.service_base import (
    AuthorizationError,
    BaseService,
    ErrorCodes,
    ErrorKind,
    NotFoundError,
    ReferenceNotFoundError,
    ServiceError,
    ServiceResult,
    ValidationError,
    service_fail,
    service_ok,
)
from utils.validation import collect_errors, validate_input


tracer = get_tracer(__name__)

MODERATION_DECISIONS = (ListingStatus.APPROVED, ListingStatus.REJECTED)
# A sold listing is out of the moderation cycle
MODERATABLE_STATES = (ListingStatus.PENDING, ListingStatus.APPROVED, ListingStatus.REJECTED)


class ListingService(BaseService):
    """
    Service for the listing lifecycle.

    Responsibilities:
    - Submit listings (always ``pending``)
    - Approve/reject listings (moderator/admin)
    - Content edits (moderator/admin) and price edits (owner or staff)
    - Mark sold and delete (owner or staff)
    - Moderation queue and public catalog reads

    All operations check the ban flag first, then authorization, then input,
    then business rules, and return ServiceResult.
    """

    def __init__(self, listings=None, references=None, notifier=None):
        super().__init__()
        self.listings = listings or ListingRepository()
        self.references = references or ReferenceValidator()
        self.notifier = notifier or container.notifier()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @BaseService.log_performance
    @transaction.atomic
    def create_listing(self, principal: Optional[Principal], draft: Dict[str, Any]) -> ServiceResult[Listing]:
        """
        Submit a new listing for moderation.

        Args:
            principal: Acting user
            draft: title, description, price, category_id, server_id and
                optionally subcategory_id, images, metadata

        Returns:
            ServiceResult with the created Listing (status ``pending``)

        Example:
            >>> result = listing_service.create_listing(principal, {
            ...     "title": "Infernus", "description": "Full tuning", "price": 150000,
            ...     "category_id": 1, "server_id": 2, "images": ["https://cdn/1.jpg"],
            ...     "metadata": {"category": "sport", "maxSpeed": 320, "tuning": "fft",
            ...                  "contacts": {"discord": "seller#1"}},
            ... })
        """
        try:
            require_not_banned(principal)

            data = validate_input(ListingDraftSerializer, draft or {}, "Invalid listing")
            category_id = data["category_id"]
            server_id = data["server_id"]
            subcategory_id = data.get("subcategory_id")
            images = data["images"]

            self._check_references(principal, category_id, server_id, subcategory_id)

            category = self.references.get_category(category_id)
            root_name = category.root.name
            if requires_images(root_name) and not images:
                raise ValidationError.for_fields(
                    {"images": [f"Listings in {root_name} need at least one image."]}, "Invalid listing"
                )
            metadata = parse_metadata(root_name, data.get("metadata"))

            listing = self.listings.insert(
                owner_id=principal.id,
                category_id=category_id,
                subcategory_id=subcategory_id,
                server_id=server_id,
                title=data["title"],
                description=data["description"],
                price=data["price"],
                images=images,
                metadata=metadata.to_dict(),
                status=ListingStatus.PENDING,
            )

            listings_created_total.labels(category=root_name).inc()
            self.notifier.notify_on_commit([LISTINGS_PENDING, LISTINGS_OWNER], listing_created(listing).to_dict())
            self.logger.info(f"Listing {listing.pk} submitted by user {principal.id}")
            return service_ok(listing)
        except ServiceError as e:
            return self._fail("create_listing", e)

    @BaseService.log_performance
    @transaction.atomic
    def decide_moderation(
        self, principal: Optional[Principal], listing_id: int, decision: str, note: Optional[str] = None
    ) -> ServiceResult[Listing]:
        """
        Approve or reject a listing.

        A rejection requires a non-empty note. The decision overwrites status,
        moderator and note in one statement; a sold listing cannot be moderated.
        """
        with tracer.start_as_current_span("listing_decide_moderation") as span, moderation_decision_duration.time():
            span.set_attribute("listing.id", str(listing_id))
            span.set_attribute("moderation.decision", str(decision))
            try:
                require_not_banned(principal)
                if not can_moderate(principal):
                    raise AuthorizationError("Only moderators and admins can moderate listings.")

                if decision not in MODERATION_DECISIONS:
                    raise ValidationError.for_fields(
                        {"status": [f"Decision must be one of {', '.join(MODERATION_DECISIONS)}."]},
                        "Invalid moderation decision",
                    )
                note = note.strip() if isinstance(note, str) else ""
                if decision == ListingStatus.REJECTED and not note:
                    raise ValidationError.for_fields(
                        {"moderator_note": ["A note explaining the rejection is required."]},
                        "Rejection note required",
                    )

                updated = self.listings.update_where(
                    listing_id,
                    MODERATABLE_STATES,
                    status=decision,
                    moderator_id=principal.id,
                    moderator_note=note or None,
                )
                if not updated:
                    current = self._get_listing(listing_id)
                    listing_transitions_rejected_total.labels(operation="decide_moderation").inc()
                    raise ValidationError(
                        f"Listing {listing_id} is {current.status} and cannot be moderated.",
                        code=ErrorCodes.INVALID_TRANSITION,
                    )

                listing = self._get_listing(listing_id)
                listing_moderation_decisions_total.labels(decision=decision).inc()
                self.notifier.notify_on_commit(
                    [LISTINGS_PENDING, LISTINGS_CATALOG, LISTINGS_OWNER],
                    listing_moderated(listing, principal.id).to_dict(),
                )
                self.logger.info(f"Listing {listing_id} {decision} by moderator {principal.id}")
                return service_ok(listing)
            except ServiceError as e:
                span.set_attribute("error.code", e.code)
                return self._fail("decide_moderation", e)

    @BaseService.log_performance
    @transaction.atomic
    def update_content(
        self, principal: Optional[Principal], listing_id: int, patch: Dict[str, Any]
    ) -> ServiceResult[Listing]:
        """Edit title, description and/or price. Staff only; owners use update_price."""
        try:
            require_not_banned(principal)
            if not can_edit_content(principal):
                raise AuthorizationError("Only moderators and admins can edit listing content.")

            if not isinstance(patch, dict) or not patch:
                raise ValidationError("Provide at least one of title, description or price.")
            serializer = ListingContentPatchSerializer(data=patch)
            errors = collect_errors(serializer)
            for key in patch:
                if key not in CONTENT_FIELDS:
                    errors.setdefault(key, []).append("This field cannot be changed.")
            if errors:
                raise ValidationError.for_fields(errors, "Invalid listing update")
            changes: Dict[str, Any] = dict(serializer.validated_data)

            if not self.listings.update(listing_id, **changes):
                raise NotFoundError(f"Listing {listing_id} not found")

            listing = self._get_listing(listing_id)
            self._notify_changed(listing_updated(listing, principal.id, changes.keys()))
            self.logger.info(f"Listing {listing_id} content edited by {principal.id}: {sorted(changes)}")
            return service_ok(listing)
        except ServiceError as e:
            return self._fail("update_content", e)

    @BaseService.log_performance
    @transaction.atomic
    def update_price(self, principal: Optional[Principal], listing_id: int, new_price) -> ServiceResult[Listing]:
        """
        Change the price. Owner, moderator or admin; not gated by status.

        Setting the current price again is a successful no-op.
        """
        try:
            require_not_banned(principal)
            listing = self._get_listing(listing_id)
            if not can_manage_listing(principal, listing.owner_id):
                raise AuthorizationError("Only the owner, moderators and admins can change the price.")

            price = validate_input(PriceSerializer, {"price": new_price}, "Invalid price")["price"]

            if price == listing.price:
                return service_ok(listing)

            if not self.listings.update(listing_id, price=price):
                raise NotFoundError(f"Listing {listing_id} not found")

            listing = self._get_listing(listing_id)
            self._notify_changed(listing_updated(listing, principal.id, ["price"]))
            return service_ok(listing)
        except ServiceError as e:
            return self._fail("update_price", e)

    @BaseService.log_performance
    @transaction.atomic
    def mark_sold(self, principal: Optional[Principal], listing_id: int) -> ServiceResult[Listing]:
        """Move an approved listing to ``sold``. Repeating on a sold listing succeeds."""
        try:
            require_not_banned(principal)
            listing = self._get_listing(listing_id)
            if not can_manage_listing(principal, listing.owner_id):
                raise AuthorizationError("Only the owner, moderators and admins can mark a listing sold.")

            if listing.status == ListingStatus.SOLD:
                return service_ok(listing)

            updated = self.listings.update_where(
                listing_id,
                [ListingStatus.APPROVED],
                status=ListingStatus.SOLD,
                moderator_id=None,
                moderator_note=None,
            )
            if not updated:
                current = self._get_listing(listing_id)
                if current.status == ListingStatus.SOLD:
                    return service_ok(current)
                listing_transitions_rejected_total.labels(operation="mark_sold").inc()
                raise ValidationError(
                    f"Only approved listings can be marked sold (listing {listing_id} is {current.status}).",
                    code=ErrorCodes.INVALID_TRANSITION,
                )

            listing = self._get_listing(listing_id)
            listings_sold_total.inc()
            self._notify_changed(listing_sold(listing, principal.id))
            return service_ok(listing)
        except ServiceError as e:
            return self._fail("mark_sold", e)

    @BaseService.log_performance
    @transaction.atomic
    def delete_listing(self, principal: Optional[Principal], listing_id: int) -> ServiceResult[None]:
        """Hard-delete a listing; favorites go with it. A second delete is NotFound."""
        try:
            require_not_banned(principal)
            listing = self._get_listing(listing_id)
            if not can_manage_listing(principal, listing.owner_id):
                raise AuthorizationError("Only the owner, moderators and admins can delete a listing.")

            if not self.listings.delete(listing_id):
                raise NotFoundError(f"Listing {listing_id} not found")

            listings_deleted_total.labels(actor_role=principal.role).inc()
            self._notify_changed(listing_deleted(listing_id, listing.owner_id, principal.id))
            self.logger.info(f"Listing {listing_id} deleted by {principal.id}")
            return service_ok(None)
        except ServiceError as e:
            return self._fail("delete_listing", e)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def list_pending(
        self,
        principal: Optional[Principal],
        filters: Optional[Dict[str, Any]] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> ServiceResult[Dict[str, Any]]:
        """Moderation queue: pending listings, oldest first, optionally by category/server."""
        try:
            require_staff(principal)
            filters = filters or {}
            queryset = self.listings.list(
                {
                    "status": ListingStatus.PENDING,
                    "category_id": filters.get("category_id"),
                    "server_id": filters.get("server_id"),
                },
                ordering="created_at",
            )
            page_data = paginate(queryset, page, page_size, marketplace_setting("PENDING_PAGE_SIZE", 50))
            if not filters.get("category_id") and not filters.get("server_id"):
                pending_queue_size.set(page_data["count"])
            return service_ok(page_data)
        except ServiceError as e:
            return self._fail("list_pending", e)

    @BaseService.log_performance
    def list_listings(
        self, filters: Optional[Dict[str, Any]] = None, page: int = 1, page_size: Optional[int] = None
    ) -> ServiceResult[Dict[str, Any]]:
        """Public catalog: approved listings only, newest first."""
        filters = dict(filters or {})
        filters["status"] = ListingStatus.APPROVED
        queryset = self.listings.list(filters, ordering="-created_at")
        return service_ok(paginate(queryset, page, page_size, marketplace_setting("CATALOG_PAGE_SIZE", 20)))

    @BaseService.log_performance
    def get_listing(self, principal: Optional[Principal], listing_id: int) -> ServiceResult[Listing]:
        """
        Approved listings are public; other states are visible to the owner and
        staff only and look like missing listings to everyone else.
        """
        try:
            listing = self._get_listing(listing_id)
            if not can_view_listing(principal, listing.owner_id, listing.status):
                raise NotFoundError(f"Listing {listing_id} not found")
            return service_ok(listing)
        except ServiceError as e:
            return service_fail(e)

    @BaseService.log_performance
    def list_owner_listings(self, principal: Optional[Principal]) -> ServiceResult[list]:
        """All of the principal's own listings in every state, newest first."""
        try:
            if principal is None:
                raise AuthorizationError("Authentication required.")
            return service_ok(list(self.listings.list({"owner_id": principal.id})))
        except ServiceError as e:
            return service_fail(e)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_listing(self, listing_id) -> Listing:
        listing = self.listings.get(listing_id)
        if listing is None:
            raise NotFoundError(f"Listing {listing_id} not found", code=ErrorCodes.LISTING_NOT_FOUND)
        return listing

    def _check_references(self, principal: Principal, category_id, server_id, subcategory_id):
        if not self.references.user_exists(principal.id):
            raise ReferenceNotFoundError(f"User {principal.id} does not exist")
        if not self.references.category_exists(category_id):
            raise ReferenceNotFoundError(
                f"Category {category_id} does not exist", fields={"category_id": ["Unknown category."]}
            )
        if not self.references.server_exists(server_id):
            raise ReferenceNotFoundError(
                f"Server {server_id} does not exist", fields={"server_id": ["Unknown server."]}
            )
        if subcategory_id is not None and not self.references.subcategory_of(subcategory_id, category_id):
            raise ReferenceNotFoundError(
                f"Subcategory {subcategory_id} does not belong to category {category_id}",
                fields={"subcategory_id": ["Unknown subcategory for this category."]},
            )

    def _notify_changed(self, event):
        self.notifier.notify_on_commit([LISTINGS_CATALOG, LISTINGS_PENDING, LISTINGS_OWNER], event.to_dict())

    def _fail(self, operation: str, exc: ServiceError) -> ServiceResult:
        if exc.kind == ErrorKind.AUTHORIZATION:
            authorization_denials_total.labels(operation=operation).inc()
        return service_fail(exc)

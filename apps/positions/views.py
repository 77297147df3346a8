"""
JSON views for portfolio positions.

This module provides the position API: create/read/replace/patch/delete,
paginated and filtered listings, top-N, the import trigger, import run
status and the destructive clear-all.

Errors use the ``{"success": false, "error": "<category>: <message>"}``
envelope from ``libs.responses``.
"""

from __future__ import annotations

import json
import logging
import math
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.core.paginator import EmptyPage, Paginator
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods

from apps.positions.forms import PositionForm, form_errors
from apps.positions.ingestion import ImportSourceError, import_positions_from_file
from apps.positions.models import Position, PositionImport
from apps.positions.serializers import (
    serialize_import,
    serialize_position,
    serialize_positions,
)
from apps.positions.services.audit import record_clear_event, record_import_event
from apps.positions.services.patch import PatchValidationError, apply_patch
from apps.positions.services.positions import (
    clear_all_positions,
    delete_position,
    delete_positions,
    existing_position_count,
    filter_positions,
    get_position,
    ordered_positions,
    top_positions,
)
from libs.responses import BadRequest, api_view, json_error, json_list, json_success

logger = logging.getLogger(__name__)

TRUE_VALUES = {"1", "true", "yes", "on"}


def _actor(request):
    user = getattr(request, "user", None)
    return user if user is not None and user.is_authenticated else None


def _json_body(request):
    try:
        return json.loads(request.body or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BadRequest(f"Malformed JSON body: {e}") from e


def _int_param(request, name: str, default: int, minimum: int = 0) -> int:
    raw = request.GET.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise BadRequest(f"'{name}' must be an integer") from e
    if value < minimum:
        raise BadRequest(f"'{name}' must be at least {minimum}")
    return value


def _decimal(raw: str, name: str) -> Decimal:
    try:
        value = Decimal(raw)
    except InvalidOperation as e:
        raise BadRequest(f"'{name}' must be a number") from e
    if not value.is_finite():
        raise BadRequest(f"'{name}' must be a number")
    return value


def _not_found(position_id: int):
    return json_error(f"Not found: Position {position_id} does not exist", status=404)


# ==================== CRUD ====================


@csrf_exempt
@require_http_methods(["GET", "POST"])
@api_view
def position_collection(request):
    """
    GET: Paginated list (``page`` is 0-based, ``size``, ``sort=field,asc|desc``).
    POST: Create a position from a JSON object.
    """
    if request.method == "POST":
        return _create_position(request)

    page = _int_param(request, "page", 0)
    size = min(
        _int_param(request, "size", settings.POSITIONS_PAGE_SIZE, minimum=1),
        settings.POSITIONS_MAX_PAGE_SIZE,
    )
    sort = request.GET.get("sort")
    try:
        queryset = ordered_positions(sort)
    except ValueError as e:
        raise BadRequest(str(e)) from e

    paginator = Paginator(queryset, size)
    try:
        content = serialize_positions(paginator.page(page + 1).object_list)
    except EmptyPage:
        content = []

    total = paginator.count
    return json_success(
        {
            "content": content,
            "page": page,
            "size": size,
            "sort": sort,
            "total_elements": total,
            "total_pages": math.ceil(total / size),
        }
    )


def _create_position(request):
    payload = _json_body(request)
    if not isinstance(payload, dict):
        raise BadRequest("Body must be a JSON object")

    form = PositionForm(payload)
    if not form.is_valid():
        return json_error(f"Validation error: {form_errors(form)}", status=400)

    position = form.save()
    logger.info("Created position %d for account %s", position.id, position.account_id)
    return json_success(serialize_position(position), status=201)


@csrf_exempt
@require_http_methods(["GET", "PUT", "PATCH", "DELETE"])
@api_view
def position_detail(request, position_id: int):
    """
    GET: Read one position.
    PUT: Full replace; fields missing from the body become null.
    PATCH: Set only the named fields.
    DELETE: Remove the position.
    """
    if request.method == "DELETE":
        if not delete_position(position_id):
            return _not_found(position_id)
        logger.info("Deleted position %d", position_id)
        return json_success(
            {
                "message": "Portfolio position deleted successfully",
                "deleted_id": position_id,
            }
        )

    position = get_position(position_id)
    if position is None:
        return _not_found(position_id)

    if request.method == "GET":
        return json_success(serialize_position(position))

    payload = _json_body(request)
    if not isinstance(payload, dict):
        raise BadRequest("Body must be a JSON object")

    if request.method == "PUT":
        form = PositionForm(payload, instance=position)
        if not form.is_valid():
            return json_error(f"Validation error: {form_errors(form)}", status=400)
        position = form.save()
        logger.info("Replaced position %d", position.id)
        return json_success(serialize_position(position))

    try:
        position = apply_patch(position, payload)
    except PatchValidationError as e:
        return json_error(f"Validation error: {e}", status=400, fields=e.fields)
    logger.info("Patched position %d: %s", position.id, ", ".join(sorted(payload)))
    return json_success(serialize_position(position))


@csrf_exempt
@require_http_methods(["DELETE"])
@api_view
def delete_batch(request):
    """Delete the positions whose ids are listed in the JSON body."""
    ids = _json_body(request)
    if not isinstance(ids, list) or not all(
        isinstance(i, int) and not isinstance(i, bool) for i in ids
    ):
        raise BadRequest("Body must be a JSON list of integer ids")

    deleted = delete_positions(ids)
    logger.info("Batch delete: %d of %d requested positions deleted", deleted, len(ids))
    return json_success(
        {
            "message": "Portfolio positions deleted successfully",
            "requested_ids": ids,
            "deleted_count": deleted,
        }
    )


# ==================== QUERIES ====================


@require_GET
@api_view
def positions_by_partner(request, partner_id: str):
    return json_list(serialize_positions(Position.objects.for_partner(partner_id)))


@require_GET
@api_view
def positions_by_account(request, account_id: str):
    return json_list(serialize_positions(Position.objects.for_account(account_id)))


@require_GET
@api_view
def positions_by_asset_class(request, asset_class: str):
    return json_list(serialize_positions(Position.objects.for_asset_class(asset_class)))


@require_GET
@api_view
def positions_by_currency(request, currency: str):
    return json_list(serialize_positions(Position.objects.for_currency(currency)))


@require_GET
@api_view
def search_positions(request):
    """Case-insensitive instrument name search (``instrumentName``)."""
    term = (request.GET.get("instrumentName") or "").strip()
    if not term:
        raise BadRequest("'instrumentName' is required")
    return json_list(serialize_positions(Position.objects.instrument_name_contains(term)))


@require_GET
@api_view
def filter_positions_view(request):
    """Combined filter; every criterion is optional."""
    min_value = request.GET.get("minValue")
    positions = filter_positions(
        partner_id=request.GET.get("partnerId"),
        account_id=request.GET.get("accountId"),
        asset_class=request.GET.get("assetClass"),
        currency=request.GET.get("currency"),
        min_value=_decimal(min_value, "minValue") if min_value else None,
        search=request.GET.get("search"),
        isin=request.GET.get("isin"),
    )
    return json_list(serialize_positions(positions))


@require_GET
@api_view
def positions_above_value(request, amount: str):
    threshold = _decimal(amount, "amount")
    return json_list(serialize_positions(Position.objects.with_value_above(threshold)))


@require_GET
@api_view
def top_positions_view(request):
    limit = min(
        _int_param(request, "limit", 10, minimum=1), settings.POSITIONS_MAX_PAGE_SIZE
    )
    return json_list(serialize_positions(top_positions(limit)))


# ==================== IMPORT / CLEAR ====================


@csrf_exempt
@require_http_methods(["POST"])
@api_view
def import_positions_view(request):
    """
    Import positions from the configured spreadsheet.

    ``clearExisting=true`` deletes every position first. A missing or
    unreadable file is reported as ``IO Error`` with status 500.
    """
    raw_flag = request.GET.get("clearExisting", request.POST.get("clearExisting", ""))
    clear_existing = raw_flag.strip().lower() in TRUE_VALUES

    try:
        result = import_positions_from_file(clear_existing=clear_existing)
    except ImportSourceError as e:
        logger.error("Import failed: %s", e)
        return json_error(f"IO Error: {e}", status=500)

    record_import_event(
        result,
        source="api",
        file_name=str(settings.POSITIONS_IMPORT_FILE),
        actor=_actor(request),
    )
    return json_success(
        {
            "message": "Import completed successfully",
            "imported_count": result.imported,
            "skipped_count": result.skipped,
            "empty_rows": result.empty_rows,
            "failed_rows": result.failed_rows,
            "existing_count_before": result.count_before,
            "total_count_after": result.count_after,
            "cleared_existing": result.cleared_existing,
            "import_id": result.import_id,
            "status": str(result.status),
        }
    )


@require_GET
@api_view
def import_status(request, import_id: int):
    """Counters of one import run with its first 20 row errors."""
    position_import = PositionImport.objects.filter(pk=import_id).first()
    if position_import is None:
        return json_error(f"Not found: Import {import_id} does not exist", status=404)

    errors = [
        {
            "row_number": error.row_number,
            "error_type": error.error_type,
            "error_code": error.error_code,
            "error_message": error.error_message,
        }
        for error in position_import.errors.all()[:20]
    ]
    return json_success({"import": serialize_import(position_import), "errors": errors})


@csrf_exempt
@require_http_methods(["DELETE"])
@api_view
def clear_all(request):
    """Delete every position. Irreversible."""
    logger.warning("Request to clear all portfolio positions")
    deleted = clear_all_positions()
    record_clear_event(deleted, source="api", actor=_actor(request))
    return json_success(
        {
            "message": "All positions cleared",
            "records_cleared_count": deleted,
            "remaining_count": existing_position_count(),
        }
    )

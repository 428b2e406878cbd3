"""Response envelopes shared by all routers.

Success: `{"success": true, "data": ..., "message"?: ...}`.
Lists add `count` and `pagination`, or return a bare array when the
caller asks for `flat=true`.
"""

from typing import Any, Optional

from pydantic import BaseModel

from realfolio.schemas.common import Pagination
from realfolio.services.resource_service import Page


def success(data: Any = None, message: Optional[str] = None) -> dict[str, Any]:
    body: dict[str, Any] = {"success": True, "data": data}
    if message:
        body["message"] = message
    return body


def paginated(page: Page, schema: type[BaseModel], flat: bool = False):
    items = [schema.model_validate(item) for item in page.items]
    if flat:
        return items
    return {
        "success": True,
        "count": len(items),
        "pagination": Pagination(page=page.page, pages=page.pages, total=page.total),
        "data": items,
    }

"""
Forum — Form Binding
=====================

What:  Binds an HTML form submission to a pydantic schema.
Why:   Every mutating action follows the same steps: render on GET, bind on
       the form's verb, validate, then persist or re-render with errors. This
       class keeps those steps out of the route bodies.
How:   handle_request() reads the urlencoded/multipart body when the request
       uses the form's method, normalizes it, and validates it. Nothing is
       written to an entity until apply_to() is called on a valid form.

Submission rules:
    - The request method must equal the form's method (PUT and DELETE may
      arrive as POST + ?_method=..., see middleware/method_override.py).
    - The body must carry at least one field. A DELETE with an empty body
      is therefore NOT submitted by handle_request(); delete actions call
      submit() with the raw body themselves.
    - Empty strings are treated as missing values.

Usage:
    form = Form(QuestionForm, method="PUT", initial={"title": q.title, ...})
    await form.handle_request(request)
    if form.is_submitted() and form.is_valid():
        form.apply_to(question)
"""

import logging
from typing import Any, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from starlette.requests import Request

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

# Error key for failures that belong to the whole form rather than one field
FORM_ERRORS = "form"

# Keys that drive the plumbing and are never part of the payload
_RESERVED_FIELDS = {"_method", "_form"}


class Form(Generic[SchemaT]):
    """A single form instance, created per request."""

    def __init__(
        self,
        schema: Type[SchemaT],
        method: str = "POST",
        initial: Optional[Mapping[str, Any]] = None,
    ):
        self.schema = schema
        self.method = method.upper()
        self.values: Dict[str, Any] = dict(initial or {})
        self.errors: Dict[str, List[str]] = {}
        self.data: Optional[SchemaT] = None
        self._submitted = False

    # ── Binding ───────────────────────────────────────────────────────────

    async def handle_request(self, request: Request) -> "Form[SchemaT]":
        """Bind the request body if this request submits the form."""
        if request.method.upper() != self.method:
            return self
        payload = await self.read_payload(request)
        if payload:
            self.submit(payload)
        return self

    @staticmethod
    async def read_payload(request: Request) -> Dict[str, Any]:
        """Raw form fields of the request body (the _form marker included)."""
        form_data = await request.form()
        return {key: value for key, value in form_data.items() if key != "_method"}

    def submit(self, payload: Optional[Mapping[str, Any]]) -> "Form[SchemaT]":
        """
        Submit `payload` regardless of the request method.

        Validation result lands in `data` (valid) or `errors` (invalid).
        """
        self._submitted = True
        payload = payload or {}
        cleaned = self._clean(payload)
        self.values.update(
            {key: value for key, value in payload.items() if key not in _RESERVED_FIELDS}
        )
        self.errors = {}
        self.data = None
        try:
            self.data = self.schema.model_validate(cleaned)
        except PydanticValidationError as e:
            self.errors = self._collect_errors(e)
            logger.debug("Form %s invalid: %s", self.schema.__name__, self.errors)
        return self

    # ── State ─────────────────────────────────────────────────────────────

    def is_submitted(self) -> bool:
        return self._submitted

    def is_valid(self) -> bool:
        return self._submitted and self.data is not None and not self.errors

    def add_error(self, field: str, message: str) -> None:
        """Attach an error found after schema validation (e.g. unknown id)."""
        self.errors.setdefault(field, []).append(message)

    def apply_to(self, entity: Any, exclude: Optional[set] = None) -> Any:
        """
        Copy the validated schema fields onto `entity`.

        Only fields declared by the schema are copied, so a narrow schema makes
        a partial update.
        """
        if not self.is_valid():
            raise RuntimeError("Cannot apply an unsubmitted or invalid form")
        for field, value in self.data.model_dump(exclude=exclude).items():
            setattr(entity, field, value)
        return entity

    # ── Helpers ───────────────────────────────────────────────────────────

    def _clean(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        cleaned: Dict[str, Any] = {}
        for key, value in payload.items():
            if key in _RESERVED_FIELDS:
                continue
            if isinstance(value, str) and value.strip() == "":
                continue
            cleaned[key] = value
        return cleaned

    @staticmethod
    def _collect_errors(exc: PydanticValidationError) -> Dict[str, List[str]]:
        errors: Dict[str, List[str]] = {}
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else FORM_ERRORS
            if error["type"] == "value_error" and "error" in error.get("ctx", {}):
                message = str(error["ctx"]["error"])
            elif error["type"] == "missing":
                message = "This value should not be blank."
            else:
                message = error["msg"]
            errors.setdefault(field, []).append(message)
        return errors

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


def _field_path(loc) -> str:
    # drop the "body"/"path"/"query" prefix FastAPI puts first
    parts = list(loc[1:]) if loc and loc[0] in ("body", "path", "query") else list(loc)
    return ".".join(str(p) for p in parts)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report request validation problems as 400 with one entry per field."""
    errors = [
        {"field": _field_path(err.get("loc", ())), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Validation failed", "errors": errors},
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

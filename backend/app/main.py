from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.core.config import settings
from backend.core.exceptions import register_exception_handlers
from backend.core.logging_config import configure_logging

# ========== Payroll Withholding ==========
from backend.modules.withholding import withholding_router

configure_logging(settings.log_level)

app = FastAPI(
    title="Payroll Withholding API",
    description="""
    Per-pay-period payroll tax withholding.

    ## Features

    * **Withholding Calculation** - Federal, state, Social Security, Medicare,
      Additional Medicare and state disability insurance for one pay event
    * **External Tax Engine** - Symmetry Tax Engine when configured, internal
      bracket calculator otherwise
    * **Batch Processing** - Many workers per call with per-worker failure isolation
    * **Audit Trail** - Every calculation recorded with the engine that produced it
    """,
    version="1.0.0",
    debug=settings.debug,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(withholding_router)


@app.get("/")
def read_root():
    return {"message": f"{settings.app_name} is running"}


@app.get("/health")
def health_check():
    return {"status": "healthy", "environment": settings.environment}

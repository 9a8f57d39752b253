"""
FastAPI Application Factory.

Exposes CRUD controller actions as remote-callable POST endpoints. Every
endpoint takes the action params as its JSON body and returns the action
response.
"""

import logging
from typing import Annotated, Any, Callable, Dict, Mapping, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from admin_generator.controller import AbstractCrudController
from admin_generator.database import get_db_session
from admin_generator.exceptions import BadRequestError, ConfigurationError
from admin_generator.logging_config import setup_logging
from admin_generator.persistence import SQLAlchemyPersistenceHandler
from admin_generator.settings import AdminGeneratorSettings, get_settings

_logger = logging.getLogger(__name__)

ControllerFactory = Callable[[Session], AbstractCrudController]
ParamsBody = Annotated[Dict[str, Any], Body()]


def session_controller_factory(controller_class: type[AbstractCrudController]) -> ControllerFactory:
    """Factory building `controller_class` over a SQLAlchemy persistence handler."""

    def factory(session: Session) -> AbstractCrudController:
        return controller_class(SQLAlchemyPersistenceHandler(session))

    return factory


def create_crud_router(
    controller_factory: ControllerFactory,
    prefix: str = "",
    tags: Optional[list[str]] = None,
    session_dependency: Callable[..., Any] = get_db_session,
) -> APIRouter:
    """
    Create a router exposing the actions of one controller.

    Args:
        controller_factory: Builds a controller for the request's session.
        prefix: Route prefix (e.g. "/direct/articles").
        tags: OpenAPI tags.
        session_dependency: FastAPI dependency yielding a Session.

    Returns:
        APIRouter with create/get/list/remove/update/get-new-record-values routes.
    """
    router = APIRouter(prefix=prefix, tags=tags or [])

    def get_controller(session: Annotated[Session, Depends(session_dependency)]) -> AbstractCrudController:
        return controller_factory(session)

    ControllerDep = Annotated[AbstractCrudController, Depends(get_controller)]

    @router.post("/create")
    def create(params: ParamsBody, controller: ControllerDep) -> Dict[str, Any]:
        return controller.create_action(params)

    @router.post("/get")
    def get(params: ParamsBody, controller: ControllerDep) -> Dict[str, Any]:
        return controller.get_action(params)

    @router.post("/list")
    def list_(params: ParamsBody, controller: ControllerDep) -> Dict[str, Any]:
        return controller.list_action(params)

    @router.post("/remove")
    def remove(params: ParamsBody, controller: ControllerDep) -> Dict[str, Any]:
        return controller.remove_action(params)

    @router.post("/update")
    def update(params: ParamsBody, controller: ControllerDep) -> Dict[str, Any]:
        return controller.update_action(params)

    @router.post("/get-new-record-values")
    def get_new_record_values(params: ParamsBody, controller: ControllerDep) -> Dict[str, Any]:
        return controller.get_new_record_values_action(params)

    return router


def register_exception_handlers(app: FastAPI) -> None:
    """Map admin generator errors to JSON responses."""

    @app.exception_handler(BadRequestError)
    async def bad_request_handler(request: Request, exc: BadRequestError) -> JSONResponse:
        _logger.info(f"Bad request on {request.url.path}: {exc} (path={exc.path})")
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=exc.to_dict())

    @app.exception_handler(ConfigurationError)
    async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
        _logger.error(f"Controller misconfigured for {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": str(exc)},
        )


def create_app(
    controllers: Mapping[str, ControllerFactory],
    settings: Optional[AdminGeneratorSettings] = None,
    title: str = "Admin Generator API",
    version: str = "1.0.0",
    session_dependency: Callable[..., Any] = get_db_session,
    configure_logging: bool = True,
) -> FastAPI:
    """
    Create a FastAPI application serving the given controllers.

    Args:
        controllers: Route name -> controller factory, e.g.
            {"articles": session_controller_factory(ArticleController)}.
        settings: Settings provider (defaults to the global one).
        title: API title for OpenAPI documentation.
        version: API version string.
        session_dependency: FastAPI dependency yielding a Session.
        configure_logging: Install the rotating file and console handlers
            from the `app.*` settings. Disable when the host application
            owns logging.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    if configure_logging:
        level_name = str(settings.get("app.log_level", "INFO")).upper()
        setup_logging(getattr(logging, level_name, logging.INFO), settings.get("app.log_dir"))

    prefix = str(settings.get("api.prefix", "")).rstrip("/")

    app = FastAPI(title=title, version=version, debug=settings.debug)

    for name, factory in controllers.items():
        app.include_router(
            create_crud_router(
                factory,
                prefix=f"{prefix}/{name}",
                tags=[name],
                session_dependency=session_dependency,
            )
        )
        _logger.info(f"CRUD routes registered under {prefix}/{name}")

    register_exception_handlers(app)

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"status": "ok", "controllers": sorted(controllers.keys())}

    return app

from fastapi import FastAPI
from fastapi.routing import APIRoute

from loggers import get_logger

logger = get_logger(__name__)

DOCS_ROUTE_NAMES = {"swagger_ui_html", "swagger_ui_redirect", "redoc_html"}


def _docs_paths(application: FastAPI | None = None) -> set[str]:
    paths = {"/openapi.json", "/docs", "/docs/oauth2-redirect", "/redoc"}
    if application is not None:
        for url in (
            application.openapi_url,
            application.docs_url,
            application.swagger_ui_oauth2_redirect_url,
            application.redoc_url,
        ):
            if url:
                paths.add(url)
    return paths


def _is_docs_route(route: APIRoute, application: FastAPI | None = None) -> bool:
    if getattr(route, "path", None) in _docs_paths(application):
        return True
    name = getattr(route, "name", "") or ""
    return name.startswith("openapi") or name in DOCS_ROUTE_NAMES


def log_routes_summary(application: FastAPI, include_debug_list: bool = False) -> None:
    routes = [r for r in application.routes if isinstance(r, APIRoute)]
    custom_routes = [r for r in routes if not _is_docs_route(r, application)]

    by_method: dict[str, int] = {}
    by_tag: dict[str, int] = {}

    for r in custom_routes:
        for m in r.methods or set():
            by_method[m] = by_method.get(m, 0) + 1
        for t in r.tags or ["<untagged>"]:
            by_tag[str(t)] = by_tag.get(str(t), 0) + 1

    logger.info(
        "API endpoints summary: total=%s methods=%s tags=%s",
        len(custom_routes),
        by_method,
        by_tag,
    )

    if include_debug_list:
        for r in sorted(
            custom_routes, key=lambda x: (min(x.methods) if x.methods else "", x.path)
        ):
            methods = ",".join(sorted(r.methods)) if r.methods else ""
            logger.debug("Route: %s %s -> %s", methods, r.path, r.name)

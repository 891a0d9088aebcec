import os
from typing import Optional

import uvicorn
from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from instagram_scraper_pkg.browser import BrowserProvider, get_browser_provider
from instagram_scraper_pkg.cookies_auth import CookieStore
from instagram_scraper_pkg.errors import ScraperError
from instagram_scraper_pkg.models import InstagramRequest, RenderRequest
from instagram_scraper_pkg.render import normalize_url, render_url
from instagram_scraper_pkg.scraper_logging import get_logger
from scraper import scrape_instagram

logger = get_logger("app")

CACHE_CONTROL = "s-maxage=3600, stale-while-revalidate"

router = APIRouter()


@router.post("/api/scrape-instagram")
async def scrape_instagram_endpoint(data: InstagramRequest, request: Request):
    status, body = await scrape_instagram(
        data,
        request.app.state.cookie_store,
        request.app.state.browser_provider,
    )
    return JSONResponse(status_code=status, content=body)


@router.get("/api/render")
async def render_endpoint(
    request: Request,
    url: Optional[str] = None,
    action: str = "screenshot",
    full_page: bool = Query(False, alias="fullPage"),
):
    req = RenderRequest(url=url, action=action, full_page=full_page)
    try:
        media_type, payload = await render_url(request.app.state.browser_provider, req)
    except ScraperError as e:
        return JSONResponse(
            status_code=e.status_code,
            content={"success": False, "error": e.error, "message": e.message},
        )
    except Exception as e:
        logger.exception("Render error")
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Failed to process request", "message": str(e)},
        )

    if media_type == "application/json":
        return JSONResponse(content={"success": True, "url": normalize_url(url), "content": payload})
    return Response(content=payload, media_type=media_type, headers={"Cache-Control": CACHE_CONTROL})


@router.get("/health")
def health():
    return {"status": "ok"}


def create_app(
    store: Optional[CookieStore] = None,
    provider: Optional[BrowserProvider] = None,
) -> FastAPI:
    """Build the API with one cookie cache and one browser provider.

    Both live for as long as the returned app; the provider is chosen from
    config when not given.
    """
    application = FastAPI(title="Instagram Scraper")
    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )
    application.state.cookie_store = store if store is not None else CookieStore()
    application.state.browser_provider = provider if provider is not None else get_browser_provider()
    application.include_router(router)
    return application


app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        app,
        host=os.environ.get("APP_HOST", "127.0.0.1"),
        port=int(os.environ.get("APP_PORT", "8000")),
        log_level="info",
    )

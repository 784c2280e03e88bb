"""Download the NYT front page PDF and render it as a high-resolution JPEG."""

import logging
import shutil
import subprocess
from pathlib import Path

import requests
from PIL import Image

from config import settings
from frontpage.exceptions import AssetDownloadFailed
from frontpage.models import DateContext, FetchedAsset

logger = logging.getLogger(__name__)

FRONT_PAGE_URL = "https://static01.nyt.com/images/{path}/nytfrontpage/scan.pdf"

# Quick Look thumbnail edge length for the primary render
RENDER_SIZE = 4500
# Fallback path upscales a plain sips conversion by this factor
FALLBACK_SCALE = 6
JPEG_QUALITY = 95

PDF_NAME = "frontpage.pdf"
JPG_NAME = "frontpage.jpg"


def front_page_url(ctx: DateContext) -> str:
    return FRONT_PAGE_URL.format(path=ctx.url_path)


def download_pdf(url: str, dest: Path, session: requests.Session | None = None) -> Path:
    """GET the PDF and write it to dest.

    Raises:
        AssetDownloadFailed: Non-200 status, empty body, or network error.
    """
    http = session or requests
    try:
        resp = http.get(
            url,
            headers={"User-Agent": settings.user_agent},
            timeout=settings.http_timeout,
        )
    except requests.RequestException as e:
        raise AssetDownloadFailed(f"Request for {url} failed: {e}") from e

    if resp.status_code != 200 or not resp.content:
        raise AssetDownloadFailed(
            f"Empty or missing front page at {url} (HTTP {resp.status_code})"
        )

    dest.write_bytes(resp.content)
    logger.info("Downloaded front page PDF (%.1f KB)", len(resp.content) / 1024)
    return dest


def _run_tool(cmd: list[str]) -> bool:
    """Run an external imaging tool; False if it is missing or fails."""
    if shutil.which(cmd[0]) is None:
        logger.debug("%s not available", cmd[0])
        return False
    result = subprocess.run(cmd, capture_output=True, text=True)
    if result.returncode != 0:
        logger.warning("%s exited %d: %s", cmd[0], result.returncode, result.stderr[:300])
        return False
    return True


def _render_quicklook(pdf_path: Path, jpg_path: Path) -> bool:
    """Primary path: Quick Look renders the PDF onto a large canvas."""
    _run_tool(["qlmanage", "-t", "-s", str(RENDER_SIZE), "-o", str(pdf_path.parent), str(pdf_path)])
    png_path = pdf_path.with_name(pdf_path.name + ".png")
    if not png_path.exists():
        return False

    logger.info("Converting PNG to JPG with high quality...")
    with Image.open(png_path) as img:
        img.convert("RGB").save(jpg_path, "JPEG", quality=JPEG_QUALITY)
    png_path.unlink()
    return jpg_path.exists()


def _render_fallback(pdf_path: Path, jpg_path: Path) -> None:
    """Fallback path: plain format conversion, then a fixed upscale."""
    logger.info("Using fallback conversion method...")
    _run_tool(["sips", "-s", "format", "jpeg", str(pdf_path), "--out", str(jpg_path)])
    if not jpg_path.exists():
        return
    try:
        with Image.open(jpg_path) as img:
            width, height = img.size
            new_size = (width * FALLBACK_SCALE, height * FALLBACK_SCALE)
            logger.info("Resizing from %dx%d to %dx%d...", width, height, *new_size)
            upscaled = img.convert("RGB").resize(new_size, Image.Resampling.LANCZOS)
        upscaled.save(jpg_path, "JPEG", quality=JPEG_QUALITY)
    except OSError as e:
        logger.warning("Upscale failed, keeping original conversion: %s", e)


def render_jpg(pdf_path: Path) -> Path | None:
    """Render the PDF to JPEG. Best effort: never raises, None if nothing was produced."""
    jpg_path = pdf_path.with_name(JPG_NAME)
    logger.info("Converting PDF to high-resolution JPG...")
    try:
        if not _render_quicklook(pdf_path, jpg_path):
            _render_fallback(pdf_path, jpg_path)
    except OSError as e:
        logger.warning("JPG conversion failed: %s", e)

    if not jpg_path.exists():
        logger.warning("No JPG could be produced from %s", pdf_path.name)
        return None

    try:
        with Image.open(jpg_path) as img:
            logger.info("High resolution image created: %d×%d pixels", *img.size)
    except OSError as e:
        logger.debug("Could not read back %s: %s", jpg_path.name, e)
    return jpg_path


def fetch_front_page(
    ctx: DateContext,
    workdir: Path,
    want_document: bool,
    want_image: bool,
    session: requests.Session | None = None,
) -> FetchedAsset | None:
    """Download the front page for ctx into workdir, deriving a JPEG if wanted.

    The image needs the PDF, so the PDF is fetched whenever either is wanted.

    Returns:
        FetchedAsset, or None when neither attachment was requested.

    Raises:
        AssetDownloadFailed: The PDF could not be downloaded.
    """
    if not (want_document or want_image):
        return None

    url = front_page_url(ctx)
    logger.info("Fetching NYT front page for %s...", ctx.iso)
    pdf_path = download_pdf(url, workdir / PDF_NAME, session=session)

    image_path = render_jpg(pdf_path) if want_image else None
    return FetchedAsset(document_path=pdf_path, image_path=image_path)

from typing import Iterator, Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import RedirectResponse, Response

from groomer_directory.api.schemas import (
    BusinessDetail,
    BusinessPageResponse,
    BusinessSummary,
    ContactRequest,
    ContactResponse,
    HealthResponse,
    ListingResponse,
    LocationOut,
    SpecializationOut,
)
from groomer_directory.data.database import database_reachable
from groomer_directory.data.repository import DirectoryRepository
from groomer_directory.directory.listing import ListingEngine, SortOrder
from groomer_directory.directory.resolver import EntityKind, EntityResolver
from groomer_directory.directory.slugs import business_slug, normalize_to_slug
from groomer_directory.directory.urls import groomer_url
from groomer_directory.exceptions import DatabaseError, InvalidContactError
from groomer_directory.logging_config import get_logger
from groomer_directory.notifications.contact import ContactService
from groomer_directory.seo.metadata import (
    breadcrumb_json_ld,
    business_page_metadata,
    listing_page_metadata,
    location_page_metadata,
    not_found_metadata,
    specialization_page_metadata,
)
from groomer_directory.seo.sitemap import build_sitemap_entries, render_sitemap_xml

logger = get_logger(__name__)

router = APIRouter()

SITEMAP_CACHE_KEY = "sitemap.xml"
NEARBY_LIMIT = 3


def get_repository(request: Request) -> Iterator[DirectoryRepository]:
    """One session per request, closed when the response is sent."""
    session = request.app.state.session_factory()
    try:
        yield DirectoryRepository(session)
    finally:
        session.close()


def get_listing_engine(request: Request, repo: DirectoryRepository = Depends(get_repository)) -> ListingEngine:
    return ListingEngine(repo, rng=getattr(request.app.state, "rng", None))


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail=not_found_metadata().model_dump())


def _permanent_redirect(path: str) -> RedirectResponse:
    logger.info("Redirecting to canonical path %s", path)
    return RedirectResponse(url=path, status_code=308)


def _listing(
    engine: ListingEngine,
    metadata,
    location=None,
    specialization=None,
    featured=None,
    search: Optional[str] = None,
    sort: str = SortOrder.RATING.value,
    page_type: str = "listing",
) -> ListingResponse:
    businesses = engine.list_businesses(
        location_id=location.id if location is not None else None,
        specialization_id=specialization.id if specialization is not None else None,
        search=search,
        sort=sort,
        exclude_id=featured.id if featured is not None else None,
    )
    return ListingResponse(
        page_type=page_type,
        metadata=metadata,
        location=LocationOut.from_location(location) if location is not None else None,
        specialization=SpecializationOut.from_specialization(specialization) if specialization is not None else None,
        featured=BusinessSummary.from_business(featured) if featured is not None else None,
        businesses=[BusinessSummary.from_business(b) for b in businesses],
        total=len(businesses),
    )


@router.get("/health", response_model=HealthResponse)
def health_check(repo: DirectoryRepository = Depends(get_repository)):
    """Liveness plus a database round trip."""
    database_ok = database_reachable(repo.session)
    return HealthResponse(status="healthy" if database_ok else "degraded", database=database_ok)


@router.get("/groomers", response_model=ListingResponse)
def list_groomers(
    location: Optional[str] = None,
    specialization: Optional[str] = None,
    search: Optional[str] = None,
    sort: str = SortOrder.RATING.value,
    repo: DirectoryRepository = Depends(get_repository),
    engine: ListingEngine = Depends(get_listing_engine),
):
    """
    Groomer listing filtered by location and/or specialization slug.

    Unknown filter slugs are ignored. When a location is selected, its
    featured business is shown separately and left out of the list.
    """
    SortOrder.parse(sort)
    resolver = EntityResolver(repo)
    loc = resolver.resolve_location(location) if location else None
    spec = resolver.resolve_specialization(specialization) if specialization else None

    featured = engine.select_featured(loc.id) if loc is not None else None
    return _listing(
        engine,
        listing_page_metadata(location=loc, specialization=spec),
        location=loc,
        specialization=spec,
        featured=featured,
        search=search,
        sort=sort,
    )


@router.get("/groomers/{slug}", response_model=BusinessPageResponse)
def groomer_detail(
    slug: str,
    repo: DirectoryRepository = Depends(get_repository),
    engine: ListingEngine = Depends(get_listing_engine),
):
    """Business profile with parsed services, opening hours and nearby groomers."""
    try:
        business = repo.get_business_by_slug(slug)
    except DatabaseError as e:
        logger.error(f"Business lookup for '{slug}' failed: {e}")
        business = None
    if business is None:
        raise _not_found()

    nearby = []
    if business.location_id is not None:
        nearby = engine.list_businesses(location_id=business.location_id, exclude_id=business.id)[:NEARBY_LIMIT]

    return BusinessPageResponse(
        metadata=business_page_metadata(business),
        business=BusinessDetail.from_business(business),
        breadcrumb=breadcrumb_json_ld(business),
        nearby=[BusinessSummary.from_business(b) for b in nearby],
    )


@router.get("/service/{slug}", response_model=ListingResponse)
def service_page(
    slug: str,
    search: Optional[str] = None,
    sort: str = SortOrder.RATING.value,
    repo: DirectoryRepository = Depends(get_repository),
    engine: ListingEngine = Depends(get_listing_engine),
):
    """Specialization page. Near-miss slugs redirect to the canonical one."""
    SortOrder.parse(sort)
    spec = EntityResolver(repo).resolve_specialization(slug, fuzzy=True)
    if spec is None:
        raise _not_found()

    canonical = normalize_to_slug(spec.name)
    if canonical != slug:
        return _permanent_redirect(f"/service/{canonical}")

    featured = engine.select_featured_for_specialization(spec.id)
    return _listing(
        engine,
        specialization_page_metadata(spec),
        specialization=spec,
        featured=featured,
        search=search,
        sort=sort,
        page_type="specialization",
    )


@router.get("/api/locations", response_model=list[LocationOut])
def api_locations(repo: DirectoryRepository = Depends(get_repository)):
    counts = repo.location_business_counts()
    return [LocationOut.from_location(loc, counts.get(loc.id, 0)) for loc in repo.list_locations()]


@router.get("/api/specializations", response_model=list[SpecializationOut])
def api_specializations(repo: DirectoryRepository = Depends(get_repository)):
    return [SpecializationOut.from_specialization(spec) for spec in repo.list_specializations()]


@router.post("/api/contact", response_model=ContactResponse)
def submit_contact(
    request_body: ContactRequest,
    request: Request,
    repo: DirectoryRepository = Depends(get_repository),
):
    """Store a contact form message and notify the site owner."""
    service = ContactService(repo, request.app.state.email_sender)
    try:
        result = service.submit(request_body.name, request_body.email, request_body.message)
    except InvalidContactError as e:
        raise HTTPException(status_code=400, detail=e.message)

    return ContactResponse(
        success=True,
        message="Thank you for your message. We'll get back to you soon.",
        id=result.message_id,
    )


@router.get("/sitemap.xml")
def sitemap(request: Request, repo: DirectoryRepository = Depends(get_repository)):
    """XML sitemap, rebuilt at most once per cache TTL."""
    cache = request.app.state.sitemap_cache
    xml = cache.get(SITEMAP_CACHE_KEY)
    if xml is None:
        entries = build_sitemap_entries(
            repo.list_locations(),
            repo.list_specializations(),
            repo.list_businesses(),
        )
        xml = render_sitemap_xml(entries)
        cache.set(SITEMAP_CACHE_KEY, xml)
        logger.info(f"Sitemap rebuilt with {len(entries)} entries")

    return Response(
        content=xml,
        media_type="application/xml",
        headers={"Cache-Control": f"public, max-age={cache.ttl_seconds}"},
    )


# Catch-all; must stay the last route registered.
@router.get("/{slug}")
def segment_page(
    slug: str,
    search: Optional[str] = None,
    sort: str = SortOrder.RATING.value,
    repo: DirectoryRepository = Depends(get_repository),
    engine: ListingEngine = Depends(get_listing_engine),
):
    """
    Top-level page for a location, specialization or business slug.

    Businesses always redirect to their profile page; locations and
    specializations redirect when reached through a non-canonical slug.
    """
    SortOrder.parse(sort)
    resolution = EntityResolver(repo).resolve(slug)
    if not resolution.found:
        raise _not_found()

    if resolution.kind is EntityKind.BUSINESS:
        return _permanent_redirect(groomer_url(business_slug(resolution.entity)))
    if resolution.needs_redirect(slug):
        return _permanent_redirect(f"/{resolution.canonical_slug}")

    if resolution.kind is EntityKind.LOCATION:
        location = resolution.entity
        featured = engine.select_featured(location.id)
        return _listing(
            engine,
            location_page_metadata(location),
            location=location,
            featured=featured,
            search=search,
            sort=sort,
            page_type="location",
        )

    spec = resolution.entity
    featured = engine.select_featured_for_specialization(spec.id)
    return _listing(
        engine,
        specialization_page_metadata(spec, path=f"/{slug}"),
        specialization=spec,
        featured=featured,
        search=search,
        sort=sort,
        page_type="specialization",
    )

"""
Resource Inliner
================

Make a document self-contained before it is serialized for rendering.

For each reference the inliner skips data URIs, resolves the URL against the
document base, fetches it and substitutes the content in place. All fetches of
one pass are coordinated by ``gather_ordered`` so the pass ends with one
deterministic completion however the fetches interleave. The number of fetches
in flight is bounded by ``max_concurrent_fetches`` across nested passes.
"""

from typing import Any, List, NamedTuple, Optional, Tuple, Union
import asyncio

from rasterinline.config.logging import get_logger
from rasterinline.config.settings import Settings, get_settings
from rasterinline.core.concurrency.ordered_map import gather_ordered
from rasterinline.core.fetching.fetcher import FetchError, HTTPResourceFetcher, ResourceFetcher
from rasterinline.core.urls import (
    extract_css_url,
    find_css_urls,
    format_css_url,
    guess_mime_type,
    is_data_uri,
    join_url,
    substitute_css_urls,
    to_data_uri,
)
from rasterinline.models.schemas import (
    FetchFailure,
    ImageReference,
    InlineDocument,
    InlineReport,
    ResourceKind,
    StyleDeclaration,
    StylesheetLink,
)

logger = get_logger(__name__)


class ResourceInliningError(Exception):
    """Exception raised when resources are missing and missing resources are fatal."""

    def __init__(self, failures: List[FetchFailure]):
        urls = ", ".join(failure.url for failure in failures)
        super().__init__(f"{len(failures)} resource(s) could not be inlined: {urls}")
        self.failures = failures


class _Substitution(NamedTuple):
    value: str
    report: InlineReport


class ResourceInliner:
    """Inline images, CSS url() references and linked stylesheets of a document."""

    def __init__(self, fetcher: ResourceFetcher, settings: Optional[Settings] = None):
        self.fetcher = fetcher
        self.settings = settings or get_settings()
        self.logger: Any = logger.bind(component="resource_inliner")  # structlog.BoundLoggerBase
        self._fetch_slots: Optional[asyncio.Semaphore] = None

    async def inline_references(self, document: InlineDocument) -> InlineReport:
        """
        Inline every reference of a document.

        Stylesheets are inlined first, then images, then CSS declarations.

        Args:
            document: References of the document, updated in place

        Returns:
            Combined report of all passes

        Raises:
            ResourceInliningError: If a resource is missing and fail_on_missing_resource is set
        """
        self.logger.info(
            "Inlining document resources",
            base_url=document.base_url,
            images=len(document.images),
            styles=len(document.styles),
            stylesheets=len(document.stylesheets),
        )

        report = await self.inline_stylesheets(document)
        report = report.merge(await self.inline_images(document))
        report = report.merge(await self.inline_css_urls(document))

        self.logger.info(
            "Document resources inlined",
            inlined=report.inlined,
            skipped=report.skipped,
            failed=len(report.failures),
        )
        return report

    async def inline_images(self, document: InlineDocument) -> InlineReport:
        """Replace each image ``src`` with a data URI."""

        async def inline(image: ImageReference) -> InlineReport:
            return await self._inline_image(image, document.base_url)

        reports = await gather_ordered(document.images, inline)
        return self._finish_pass("images", reports)

    async def inline_css_urls(self, document: InlineDocument) -> InlineReport:
        """Replace the url() references of each CSS declaration with data URIs."""

        async def inline(declaration: StyleDeclaration) -> InlineReport:
            substitution = await self._inline_css_value(declaration.value, document.base_url)
            declaration.value = substitution.value
            return substitution.report

        reports = await gather_ordered(document.styles, inline)
        return self._finish_pass("css_urls", reports)

    async def inline_stylesheets(self, document: InlineDocument) -> InlineReport:
        """
        Load the content of each linked stylesheet.

        The url() references inside a stylesheet are resolved against the
        stylesheet's own URL and inlined as well.
        """

        async def inline(link: StylesheetLink) -> InlineReport:
            return await self._inline_stylesheet(link, document.base_url)

        reports = await gather_ordered(document.stylesheets, inline)
        return self._finish_pass("stylesheets", reports)

    async def _inline_image(self, image: ImageReference, base_url: str) -> InlineReport:
        if is_data_uri(image.src):
            return InlineReport(skipped=1)

        url = join_url(base_url, image.src)
        try:
            content = await self._fetch(url, binary=True)
        except FetchError as e:
            return self._failed(url, e, ResourceKind.IMAGE)

        image.src = to_data_uri(content, self._mime_type(url))
        return InlineReport(inlined=1)

    async def _inline_stylesheet(self, link: StylesheetLink, base_url: str) -> InlineReport:
        if link.is_inlined or is_data_uri(link.href):
            return InlineReport(skipped=1)

        url = join_url(base_url, link.href)
        try:
            content = await self._fetch(url, binary=False)
        except FetchError as e:
            return self._failed(url, e, ResourceKind.STYLESHEET)

        substitution = await self._inline_css_value(content, url)
        link.content = substitution.value
        return InlineReport(inlined=1).merge(substitution.report)

    async def _inline_css_value(self, value: str, base_url: str) -> _Substitution:
        """Inline every url() token of a CSS value or stylesheet."""
        tokens = find_css_urls(value)
        if not tokens:
            return _Substitution(value, InlineReport())

        async def inline(token: str) -> _Substitution:
            return await self._inline_css_token(token, base_url)

        substitutions = await gather_ordered(tokens, inline)
        report = InlineReport()
        for substitution in substitutions:
            report = report.merge(substitution.report)

        return _Substitution(
            substitute_css_urls(value, [substitution.value for substitution in substitutions]),
            report,
        )

    async def _inline_css_token(self, token: str, base_url: str) -> _Substitution:
        url = extract_css_url(token)
        if not url or is_data_uri(url):
            return _Substitution(token, InlineReport(skipped=1))

        resolved = join_url(base_url, url)
        try:
            content = await self._fetch(resolved, binary=True)
        except FetchError as e:
            return _Substitution(token, self._failed(resolved, e, ResourceKind.CSS_URL))

        data_uri = to_data_uri(content, self._mime_type(resolved))
        return _Substitution(format_css_url(data_uri), InlineReport(inlined=1))

    async def _fetch(self, url: str, binary: bool) -> Union[str, bytes]:
        """Fetch through the fetcher, at most max_concurrent_fetches at a time."""
        # Shared by nested passes, so stylesheet and multi-url() fetches count too
        if self._fetch_slots is None:
            self._fetch_slots = asyncio.Semaphore(self.settings.max_concurrent_fetches)
        async with self._fetch_slots:
            if binary:
                return await self.fetcher.fetch_binary(url)
            return await self.fetcher.fetch_text(url)

    def _mime_type(self, url: str) -> str:
        return guess_mime_type(url, self.settings.default_image_mime_type)

    def _failed(self, url: str, error: FetchError, kind: ResourceKind) -> InlineReport:
        # The reference is left untouched
        self.logger.warning(
            "Resource could not be inlined", url=url, kind=kind.value, error=error.reason
        )
        return InlineReport(failures=[FetchFailure(url=url, reason=error.reason, kind=kind)])

    def _finish_pass(self, name: str, reports: List[InlineReport]) -> InlineReport:
        report = InlineReport()
        for item in reports:
            report = report.merge(item)

        self.logger.debug(
            "Inlining pass completed",
            inlining_pass=name,
            inlined=report.inlined,
            skipped=report.skipped,
            failed=len(report.failures),
        )

        if report.failures and self.settings.fail_on_missing_resource:
            raise ResourceInliningError(report.failures)
        return report


async def inline_document(
    document: InlineDocument,
    fetcher: Optional[ResourceFetcher] = None,
    settings: Optional[Settings] = None,
) -> Tuple[InlineDocument, InlineReport]:
    """
    Inline every reference of a document.

    When no fetcher is given an HTTPResourceFetcher is created and closed afterwards.

    Args:
        document: References of the document, updated in place
        fetcher: Fetch collaborator to use
        settings: Settings overriding the global ones

    Returns:
        The updated document and the inlining report
    """
    own_fetcher = fetcher is None
    if fetcher is None:
        fetcher = HTTPResourceFetcher(settings=settings)

    try:
        report = await ResourceInliner(fetcher, settings=settings).inline_references(document)
    finally:
        if own_fetcher:
            await fetcher.close()

    return document, report

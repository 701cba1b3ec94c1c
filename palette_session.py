"""Per-session palette generation: result cache, loading state and debouncing."""
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple, Union

from color_spaces import get_contrast_color, is_valid_hex_color, standardize_hex_color
from defaults import (
    DEFAULT_DEBOUNCE_SECONDS,
    DEFAULT_SWATCH_COUNT,
    MAX_SWATCH_COUNT,
    MIN_SWATCH_COUNT,
)
from harmonies import SchemeLike, SchemeType, clamp_swatch_count, generate_palette

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, SchemeType, int]


class InvalidColorError(ValueError):
    def __init__(self, color: str) -> None:
        super().__init__("Please enter a valid hex color code")
        self.color = color


class SwatchCountError(ValueError):
    pass


@dataclass
class GeneratedPalette:
    base_color: str
    scheme: SchemeType
    requested_count: int
    colors: List[str]
    text_colors: List[str]
    warnings: List[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.colors)

    @property
    def count_adjusted(self) -> bool:
        return self.count != self.requested_count

    def swatches(self) -> List[Tuple[str, str]]:
        return list(zip(self.colors, self.text_colors))


def build_generated_palette(
    base_color: str, scheme: SchemeLike, count: int
) -> GeneratedPalette:
    scheme = SchemeType(scheme)
    base_hex = standardize_hex_color(base_color)
    colors = generate_palette(base_hex, scheme, count)

    warnings: List[str] = []
    produced = clamp_swatch_count(scheme, count)
    if produced > count:
        warnings.append(
            f"{scheme.value} needs at least {produced} swatches; "
            f"produced {produced} instead of {count}."
        )
    elif produced < count:
        warnings.append(
            f"Palettes are capped at {MAX_SWATCH_COUNT} swatches; "
            f"produced {produced} instead of {count}."
        )

    return GeneratedPalette(
        base_color=base_hex,
        scheme=scheme,
        requested_count=count,
        colors=colors,
        text_colors=[get_contrast_color(color) for color in colors],
        warnings=warnings,
    )


class PaletteCache:
    """Unbounded in-memory mapping of (color, scheme, count) to palettes.

    Keys are immutable value tuples, so entries are never invalidated.
    """

    def __init__(self) -> None:
        self._entries: Dict[CacheKey, GeneratedPalette] = {}

    @staticmethod
    def make_key(base_color: str, scheme: SchemeLike, count: int) -> CacheKey:
        return (standardize_hex_color(base_color), SchemeType(scheme), int(count))

    def get(
        self, base_color: str, scheme: SchemeLike, count: int
    ) -> Optional[GeneratedPalette]:
        return self._entries.get(self.make_key(base_color, scheme, count))

    def put(self, palette: GeneratedPalette) -> None:
        key = self.make_key(palette.base_color, palette.scheme, palette.requested_count)
        self._entries[key] = palette

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)


class Debouncer:
    """Trailing-edge debounce on the running asyncio loop.

    Each call supersedes the pending one; only the last call inside ``wait``
    seconds of quiet runs. Must be called from a coroutine or loop callback.
    """

    def __init__(
        self,
        func: Callable[..., Union[Any, Awaitable[Any]]],
        wait: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self.func = func
        self.wait = wait
        self._pending: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        if self.pending:
            logger.debug("Debounced call superseded")
            self._pending.cancel()
        loop = asyncio.get_running_loop()
        self._pending = loop.create_task(self._fire_later(args, kwargs))
        self._pending.add_done_callback(self._collect_result)

    async def _fire_later(self, args: Tuple[Any, ...], kwargs: Dict[str, Any]) -> None:
        await asyncio.sleep(self.wait)
        result = self.func(*args, **kwargs)
        if inspect.isawaitable(result):
            await result

    @staticmethod
    def _collect_result(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error("Debounced call failed", exc_info=exc)

    def cancel(self) -> None:
        if self.pending:
            self._pending.cancel()
        self._pending = None

    async def flush(self) -> None:
        """Wait until no call is pending, including calls made while waiting.

        Failures of the debounced call are logged, not raised here.
        """
        while self.pending:
            task = self._pending
            await asyncio.wait({task})


class PaletteSession:
    """Generation state owned by one user session.

    The cache is injected so separate sessions never share results unless
    the caller hands them the same cache.
    """

    def __init__(
        self,
        cache: Optional[PaletteCache] = None,
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        on_error: Optional[Callable[[Exception], None]] = None,
        on_palette: Optional[Callable[[GeneratedPalette], None]] = None,
    ) -> None:
        self.cache = cache if cache is not None else PaletteCache()
        self.loading = False
        self.palette: Optional[GeneratedPalette] = None
        self.on_error = on_error
        self.on_palette = on_palette
        self._debounced_generate = Debouncer(self._generate_reporting, debounce_seconds)

    async def generate(
        self,
        base_color: str,
        scheme: SchemeLike = SchemeType.MONOCHROMATIC,
        count: int = DEFAULT_SWATCH_COUNT,
    ) -> GeneratedPalette:
        if not is_valid_hex_color(base_color):
            raise InvalidColorError(base_color)

        cached = self.cache.get(base_color, scheme, count)
        if cached is not None:
            logger.debug("Palette cache hit for %s/%s/%d", base_color, scheme, count)
            self.palette = cached
            return cached

        try:
            self.loading = True
            # Yield once so a loading indicator can render first.
            await asyncio.sleep(0)
            palette = build_generated_palette(base_color, scheme, count)
            self.cache.put(palette)
            self.palette = palette
            logger.debug(
                "Generated %d-swatch %s palette for %s",
                palette.count,
                palette.scheme.value,
                palette.base_color,
            )
            return palette
        except Exception:
            logger.exception("Failed to generate palette")
            raise
        finally:
            self.loading = False

    async def _generate_reporting(
        self, base_color: str, scheme: SchemeLike, count: int
    ) -> None:
        try:
            palette = await self.generate(base_color, scheme, count)
        except Exception as exc:
            if self.on_error is None:
                raise
            self.on_error(exc)
            return
        if self.on_palette is not None:
            self.on_palette(palette)

    def request(
        self,
        base_color: str,
        scheme: SchemeLike = SchemeType.MONOCHROMATIC,
        count: int = DEFAULT_SWATCH_COUNT,
    ) -> None:
        """Debounced :meth:`generate`; results go to ``on_palette``."""
        self._debounced_generate(base_color, scheme, count)

    async def settle(self) -> None:
        await self._debounced_generate.flush()


def add_swatch(count: int) -> int:
    if count >= MAX_SWATCH_COUNT:
        raise SwatchCountError(
            f"Cannot add swatch. Maximum of {MAX_SWATCH_COUNT} swatches allowed."
        )
    return count + 1


def remove_swatch(count: int) -> int:
    if count <= MIN_SWATCH_COUNT:
        raise SwatchCountError(
            f"Cannot remove swatch. Minimum of {MIN_SWATCH_COUNT} swatches required."
        )
    return count - 1

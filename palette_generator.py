import asyncio
import importlib
import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping, Optional, Tuple

import streamlit as st

from color_spaces import (
    hex_to_hsl,
    is_valid_hex_color,
    random_hex_color,
    round_half_up,
    standardize_hex_color,
)
from defaults import (
    DEFAULT_BASE_COLOR,
    DEFAULT_COLOR_FORMAT,
    DEFAULT_EXPORT_KEY_PREFIX,
    DEFAULT_EXPORT_LINE_TERMINATOR,
    DEFAULT_EXPORT_WRAP_QUOTES,
    DEFAULT_SWATCH_COUNT,
    MAX_SWATCH_COUNT,
    MIN_SWATCH_COUNT,
    OKLCH_CHROMA_SCALE,
    SHARE_QUERY_PARAM,
)
from harmonies import SCHEME_LABELS, SchemeLike, SchemeType, is_valid_scheme
from palette_session import (
    GeneratedPalette,
    InvalidColorError,
    PaletteSession,
    SwatchCountError,
    add_swatch,
    remove_swatch,
)

logger = logging.getLogger(__name__)

pyperclip: Optional[Any]
try:
    pyperclip = importlib.import_module("pyperclip")
except ImportError:  # pragma: no cover - optional dependency
    pyperclip = None


class ColorFormat(str, Enum):
    HEX = "hex"
    HSL = "hsl"
    OKLCH = "oklch"


COLOR_FORMAT_LABELS = {
    ColorFormat.HEX: "HEX (#rrggbb)",
    ColorFormat.HSL: "HSL (H S% L%)",
    ColorFormat.OKLCH: "OKLCH (L% C H)",
}


@dataclass
class PaletteExportOptions:
    key_prefix: str = DEFAULT_EXPORT_KEY_PREFIX
    line_terminator: str = DEFAULT_EXPORT_LINE_TERMINATOR
    wrap_values_in_quotes: bool = DEFAULT_EXPORT_WRAP_QUOTES


def format_color(hex_color: str, color_format: ColorFormat) -> str:
    """Render a swatch for the clipboard.

    The oklch form is a display approximation derived from HSL, not a true
    OKLCH conversion.
    """
    try:
        if color_format == ColorFormat.HSL:
            h, s, l = hex_to_hsl(hex_color)
            return (
                f"hsl({round_half_up(h)}deg {round_half_up(s * 100)}% "
                f"{round_half_up(l * 100)}%)"
            )
        if color_format == ColorFormat.OKLCH:
            h, s, l = hex_to_hsl(hex_color)
            chroma = s * OKLCH_CHROMA_SCALE
            return f"oklch({round_half_up(l * 100)}% {chroma:.2f} {round_half_up(h)}deg)"
    except ValueError:
        logger.exception("Error formatting color %r", hex_color)
    return hex_color


def format_palette_export(
    colors: List[str],
    color_format: ColorFormat,
    options: PaletteExportOptions,
) -> str:
    lines: List[str] = []
    for position, color in enumerate(colors, start=1):
        formatted_value = format_color(color, color_format)
        if options.wrap_values_in_quotes:
            value_str = f'"{formatted_value}"'
        else:
            value_str = formatted_value

        key_str = f"{options.key_prefix}{position}"
        # CSS custom properties stay bare.
        is_custom_property = key_str.startswith("--") and " " not in key_str
        if not is_custom_property and (" " in key_str or "-" in key_str):
            key_str = f'"{key_str}"'

        lines.append(f"    {key_str}: {value_str}{options.line_terminator}")

    return "{\n" + "\n".join(lines) + "\n}"


# --- Sharing ---------------------------------------------------------------

def encode_share_fragment(color: str, scheme: SchemeLike) -> str:
    return f"{standardize_hex_color(color)[1:]}/{SchemeType(scheme).value}"


def build_share_url(
    base_url: str,
    color: str,
    scheme: SchemeLike,
    query_param: Optional[str] = None,
) -> str:
    fragment = encode_share_fragment(color, scheme)
    if query_param:
        return f"{base_url}?{query_param}={fragment}"
    return f"{base_url}#{fragment}"


def parse_share_fragment(fragment: str) -> Tuple[Optional[str], Optional[SchemeType]]:
    """Split ``rrggbb/scheme`` into its parts; invalid parts come back as None."""
    parts = fragment.lstrip("#").split("/")
    color = parts[0] if parts else ""
    scheme_name = parts[1] if len(parts) >= 2 else ""
    parsed_color = standardize_hex_color(color) if is_valid_hex_color(color) else None
    parsed_scheme = SchemeType(scheme_name) if is_valid_scheme(scheme_name) else None
    return parsed_color, parsed_scheme


def resolve_share_state(
    fragment: Optional[str], rng: Optional[random.Random] = None
) -> Tuple[str, SchemeType]:
    color, scheme = parse_share_fragment(fragment or "")
    if color is None:
        color = random_hex_color(rng)
    if scheme is None:
        scheme = SchemeType.MONOCHROMATIC
    return color, scheme


def copy_to_clipboard(text: str) -> bool:
    if pyperclip is None:
        return False
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException:
        logger.warning("Clipboard unavailable; could not copy %r", text)
        return False
    return True


# --- Streamlit page --------------------------------------------------------

def _get_session() -> PaletteSession:
    if "palette_session" not in st.session_state:
        st.session_state["palette_session"] = PaletteSession()
    return st.session_state["palette_session"]


def initial_page_state(
    query_params: Mapping[str, str], rng: Optional[random.Random] = None
) -> Tuple[str, SchemeType]:
    """Base color and scheme for a first visit; no shared color means a random one."""
    return resolve_share_state(query_params.get(SHARE_QUERY_PARAM), rng)


def _ensure_page_state() -> None:
    if "input_color" in st.session_state:
        return
    color, scheme = initial_page_state(st.query_params)
    st.session_state["input_color"] = color
    st.session_state["color_picker"] = color
    st.session_state["scheme"] = scheme
    st.session_state["swatch_count"] = DEFAULT_SWATCH_COUNT
    st.session_state["color_format"] = ColorFormat(DEFAULT_COLOR_FORMAT)


def _on_picker_change() -> None:
    st.session_state["input_color"] = st.session_state["color_picker"]


def _on_input_change() -> None:
    value = st.session_state["input_color"]
    if is_valid_hex_color(value):
        st.session_state["color_picker"] = standardize_hex_color(value)


def _on_random_color() -> None:
    color = random_hex_color()
    st.session_state["input_color"] = color
    st.session_state["color_picker"] = color


def _on_swatch_step(step: int) -> None:
    count = st.session_state["swatch_count"]
    try:
        st.session_state["swatch_count"] = (
            add_swatch(count) if step > 0 else remove_swatch(count)
        )
    except SwatchCountError as exc:
        st.toast(str(exc))


def palette_controls_component() -> Tuple[str, SchemeType, int, ColorFormat]:
    col_picker, col_input, col_random = st.columns([1, 4, 1])
    col_picker.color_picker(
        label="Base color",
        key="color_picker",
        label_visibility="collapsed",
        on_change=_on_picker_change,
    )
    input_color = col_input.text_input(
        label="Hex",
        key="input_color",
        placeholder=DEFAULT_BASE_COLOR,
        label_visibility="collapsed",
        on_change=_on_input_change,
    )
    col_random.button("Random", on_click=_on_random_color)

    col_scheme, col_format = st.columns(2)
    scheme = col_scheme.selectbox(
        label="Scheme",
        options=list(SchemeType),
        format_func=lambda opt: SCHEME_LABELS[opt],
        key="scheme",
    )
    color_format = col_format.selectbox(
        label="Copy format",
        options=list(ColorFormat),
        format_func=lambda opt: COLOR_FORMAT_LABELS[opt],
        key="color_format",
    )

    swatch_count = st.slider(
        label="Swatches",
        min_value=MIN_SWATCH_COUNT,
        max_value=MAX_SWATCH_COUNT,
        step=1,
        key="swatch_count",
    )
    col_remove, col_add, _ = st.columns([1, 1, 6])
    col_remove.button("−", on_click=_on_swatch_step, args=(-1,))
    col_add.button("+", on_click=_on_swatch_step, args=(1,))

    return input_color, scheme, swatch_count, color_format


def generate_for_page(
    session: PaletteSession, color: str, scheme: SchemeType, count: int
) -> Optional[GeneratedPalette]:
    try:
        with st.spinner("Generating palette..."):
            palette = asyncio.run(session.generate(color, scheme, count))
    except InvalidColorError as exc:
        st.error(str(exc))
        return None
    except Exception:
        st.toast("Failed to generate palette. Please check your input color.")
        return None

    st.query_params[SHARE_QUERY_PARAM] = encode_share_fragment(
        palette.base_color, palette.scheme
    )
    return palette


def palette_component(
    generated_palette: GeneratedPalette, color_format: ColorFormat
) -> None:
    for warning in generated_palette.warnings:
        st.caption(warning)

    cols = st.columns(generated_palette.count)
    for index, ((color, text_color), col) in enumerate(
        zip(generated_palette.swatches(), cols)
    ):
        formatted = format_color(color, color_format)
        col.markdown(
            f'<div style="background:{color};color:{text_color};'
            'aspect-ratio:1;display:flex;align-items:center;justify-content:center;'
            f'font-family:monospace;font-size:0.7rem;text-align:center">'
            f"{formatted}</div>",
            unsafe_allow_html=True,
        )
        if col.button("Copy", key=f"copy_{index}"):
            if copy_to_clipboard(formatted):
                st.toast(f"Copied {formatted} to clipboard!")
            else:
                st.toast("Failed to copy to clipboard")

    st.caption(f"Copy buttons use the {color_format.value.upper()} value.")

    with st.expander("Export", expanded=False):
        export_str = format_palette_export(
            generated_palette.colors, color_format, PaletteExportOptions()
        )
        st.code(body=f":root {export_str}", language="css")

    with st.expander("Share", expanded=False):
        share_url = build_share_url(
            "",
            generated_palette.base_color,
            generated_palette.scheme,
            query_param=SHARE_QUERY_PARAM,
        )
        st.code(body=share_url, language="text")
        if st.button("Copy share link"):
            if copy_to_clipboard(share_url):
                st.toast("Share URL copied to clipboard!")
            else:
                st.toast("Failed to copy share URL")


def main() -> None:
    logging.basicConfig(level=logging.INFO)
    st.title("Harmony Palette Generator")

    _ensure_page_state()
    session = _get_session()

    color, scheme, count, color_format = palette_controls_component()

    palette = generate_for_page(session, color, scheme, count)
    if palette:
        palette_component(palette, color_format)


if __name__ == "__main__":
    main()

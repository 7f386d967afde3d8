"""JVM bytecode instruction reference.

The full instruction table is scraped from Wikipedia's list of Java bytecode
instructions and cached as one entry; individual lookups are served from it.
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Optional, Tuple

from arisa.cache.lookup_cache import LookupCache
from arisa.datatypes.lookup_datatypes import JvmInstruction
from arisa.errors import FetchError, InvalidFormat
from arisa.services.html_extract import parse_html
from arisa.services.http_client import HttpClient
from arisa.util.logger import get_logger

logger = get_logger("opcode_service")

SOURCE_URL = "https://en.wikipedia.org/wiki/List_of_Java_bytecode_instructions"
SPEC_URL = "https://docs.oracle.com/javase/specs/jvms/se24/html/jvms-6.html#{anchor}"
TABLE_KEY = "wikipedia"
AUTOCOMPLETE_LIMIT = 25
AUTOCOMPLETE_WAIT_SECONDS = 2.5

InstructionTable = Dict[str, JvmInstruction]


def parse_stack(stack: str) -> Tuple[str, str]:
    """Split an ``a, b → c`` stack transition into (before, after)."""
    if not stack or stack.lower() == "[no change]":
        return "No change", "No change"
    if "→" in stack:
        parts = stack.split("→")
        if len(parts) == 2:
            before = parts[0].strip() or "..."
            after = parts[1].strip() or "[empty]"
            return before, after
    return "...", stack


def parse_instruction_table(markup: str) -> InstructionTable:
    """Parse the Wikipedia instruction table into a mnemonic -> instruction map.

    Each instruction is reachable by its lower-case mnemonic and by the
    hyphenated form used in JVMS anchors (``aload-0``).

    Raises
    ------
    FetchError
        When the page contains no recognizable instruction rows.
    """
    document = parse_html(markup)
    table: InstructionTable = {}

    for wikitable in document.find_all("table", class_="wikitable"):
        for row in wikitable.find_all("tr"):
            cells = row.find_all("td")
            if len(cells) < 6:
                continue
            mnemonic = cells[0].clean_text()
            if not mnemonic:
                continue
            before, after = parse_stack(cells[4].clean_text())
            instruction = JvmInstruction(
                mnemonic=mnemonic,
                opcode_hex=cells[1].clean_text(),
                other_bytes=cells[3].clean_text(),
                stack_before=before,
                stack_after=after,
                description=cells[5].clean_text(),
            )
            key = mnemonic.lower()
            table.setdefault(key, instruction)
            table.setdefault(instruction.anchor_id.removeprefix("jvm-").lower(), instruction)

    if not table:
        raise FetchError("No JVM instructions found in the reference page")
    return table


async def fetch_instruction_table(http: HttpClient) -> InstructionTable:
    markup = await http.get_text(SOURCE_URL)
    table = parse_instruction_table(markup)
    logger.info("Loaded %d JVM instruction names", len(table))
    return table


async def load_table(cache: LookupCache[InstructionTable], http: HttpClient) -> InstructionTable:
    return await cache.get_or_fetch(TABLE_KEY, lambda: fetch_instruction_table(http))


async def lookup_instruction(
    cache: LookupCache[InstructionTable], http: HttpClient, name: str
) -> JvmInstruction:
    """Return the instruction called ``name`` (case-insensitive).

    Raises
    ------
    InvalidFormat
        When no instruction has that name.
    """
    table = await load_table(cache, http)
    instruction = table.get(name.strip().lower())
    if instruction is None:
        raise InvalidFormat(
            f"JVM instruction '{name}' not found. Try checking the spelling or use a different instruction name."
        )
    return instruction


async def autocomplete_names(
    cache: LookupCache[InstructionTable], http: HttpClient, partial: str
) -> List[str]:
    """Return up to 25 mnemonics starting with ``partial``.

    Discord gives autocomplete only a few seconds, so a cold cache is awaited
    for a bounded time; the shared fetch keeps running and warms the cache.
    """
    table: Optional[InstructionTable] = cache.get(TABLE_KEY)
    if table is None:
        try:
            table = await asyncio.wait_for(asyncio.shield(load_table(cache, http)), AUTOCOMPLETE_WAIT_SECONDS)
        except (asyncio.TimeoutError, FetchError) as exc:
            logger.debug("Opcode autocomplete without table: %s", str(exc) or "timeout")
            return []

    prefix = partial.strip().lower()
    names = sorted({instruction.mnemonic.lower() for instruction in table.values()})
    return [name for name in names if name.startswith(prefix)][:AUTOCOMPLETE_LIMIT]


# -------------------- Formatting --------------------

def format_instruction(instruction: JvmInstruction, detailed: bool = False) -> str:
    lines: List[str] = []
    opcode = instruction.opcode

    if opcode is not None:
        lines.append(f"**Opcode:** `{instruction.mnemonic} = {opcode} (0x{instruction.opcode_hex})`")
    lines.append(f"**Format:** `{instruction.format}`\n")
    lines.append(f"**Description:** {instruction.description}")

    if detailed:
        lines.append("\n**Stack Changes:**")
        lines.append(f"• Before: `{instruction.stack_before}`")
        lines.append(f"• After: `{instruction.stack_after}`")
        if opcode is not None:
            lines.append("\n**Opcode Details:**")
            lines.append(f"• Decimal: {opcode}")
            lines.append(f"• Hexadecimal: 0x{opcode:02X}")

    lines.append(f"\n[JVM Specification]({SPEC_URL.format(anchor=instruction.anchor_id)})")
    return "\n".join(lines)

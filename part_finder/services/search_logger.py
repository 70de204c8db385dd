"""
Search Logger - Write completed searches to .txt files for later review
Works in both development and when packaged as .exe
"""
import logging
import os
import sys
from datetime import datetime
from typing import List

from part_finder import config
from part_finder.schemas import AlternativePartRecord, SearchResult

logger = logging.getLogger(__name__)


def get_log_directory() -> str:
    """
    Get the directory where search logs should be saved.

    SEARCH_LOG_DIR wins; otherwise a logs/ folder next to the exe or the
    package.
    """
    if config.SEARCH_LOG_DIR:
        log_dir = config.SEARCH_LOG_DIR
    else:
        if getattr(sys, 'frozen', False):
            base_dir = os.path.dirname(sys.executable)
        else:
            base_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        log_dir = os.path.join(base_dir, 'logs')

    os.makedirs(log_dir, exist_ok=True)
    return log_dir


def _wrap(text: str, width: int = 78) -> List[str]:
    lines = []
    current_line = ""
    for word in text.split():
        if len(current_line) + len(word) + 1 > width:
            if current_line:
                lines.append(f"  {current_line}")
            current_line = word
        else:
            current_line = f"{current_line} {word}" if current_line else word
    if current_line:
        lines.append(f"  {current_line}")
    return lines


def format_part(part: AlternativePartRecord) -> str:
    """
    Format a single part record for text output.

    Args:
        part: Primary part or alternative

    Returns:
        Formatted string representation
    """
    lines = ["-" * 80]
    lines.append(f"Part Number: {part.part_number or 'N/A'}")
    lines.append(f"Brand: {part.brand or 'N/A'}")
    if part.stock:
        lines.append(f"Stock: {part.stock}")
    if part.application:
        lines.append(f"Application: {part.application}")
    if part.description:
        lines.append("\nDescription:")
        lines.extend(_wrap(part.description))
    if part.specs:
        lines.append("\nSpecs:")
        for spec in part.specs:
            lines.append(f"  - {spec}")
    lines.append("")
    return "\n".join(lines)


def log_search_result(query: str, result: SearchResult) -> str:
    """
    Log one completed search to a .txt file.

    Args:
        query: The user's query
        result: Decoded search result

    Returns:
        Path to the created log file, or "" when writing failed
    """
    try:
        log_dir = get_log_directory()

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        log_path = os.path.join(log_dir, f"search_{timestamp}.txt")

        with open(log_path, 'w', encoding='utf-8') as f:
            f.write("=" * 80 + "\n")
            f.write("Part Search Log\n")
            f.write(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")
            f.write("=" * 80 + "\n\n")

            f.write("QUERY\n")
            f.write("\n".join(_wrap(query)) + "\n\n")

            f.write("PRIMARY MATCH\n")
            f.write(format_part(result.part))
            f.write("\n")

            f.write(f"ALTERNATIVES ({len(result.alternatives)})\n")
            for idx, alt in enumerate(result.alternatives, 1):
                f.write(f"Alternative #{idx}\n")
                f.write(format_part(alt))
                f.write("\n")

            f.write("=" * 80 + "\n")
            f.write("End of Search Log\n")

        logger.info("Search log written to %s", log_path)
        return log_path

    except OSError:
        # A failed log write must not fail the search
        logger.exception("Error writing search log")
        return ""

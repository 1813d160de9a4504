"""
Find the subtitle files an invocation produced and keep the richest one.
"""

from pathlib import Path
from typing import List, Optional

from youtube2txt.core.subtitle_parser import parse_vtt
from youtube2txt.models.schemas import InvocationHandle, SubtitleCandidate
from youtube2txt.utils.error_handling import NoReadableTranscriptError, NoTranscriptFoundError
from youtube2txt.utils.filesystem import Filesystem
from youtube2txt.utils.logger import logging


def find_candidate_files(fs: Filesystem, handle: InvocationHandle, extension: str = ".vtt") -> List[str]:
    """List the files owned by the handle that carry the subtitle extension."""
    return sorted(
        name for name in fs.list_dir(handle.directory)
        if handle.owns(name) and name.endswith(extension)
    )


def score_candidate(fs: Filesystem, directory: Path, file_name: str) -> Optional[SubtitleCandidate]:
    """Parse one file; unreadable or unparsable files yield None."""
    try:
        content = fs.read_text(Path(directory) / file_name)
        cues = parse_vtt(content)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        logging.debug(f"Skipping unreadable subtitle file {file_name}: {str(e)}")
        return None
    return SubtitleCandidate(
        file_name=file_name,
        cues=cues,
        text_length=sum(len(cue.text) for cue in cues),
    )


def pick_best_subtitle(fs: Filesystem, directory: Path, files: List[str]) -> Optional[SubtitleCandidate]:
    """
    Pick the candidate with the most cue text.

    Ties go to the lexically smallest file name. The language code in the name
    plays no part in the choice.
    """
    candidates = [
        candidate for candidate in (score_candidate(fs, directory, name) for name in files)
        if candidate is not None
    ]
    if not candidates:
        return None
    candidates.sort(key=lambda c: (-c.text_length, c.file_name))
    return candidates[0]


def select_transcript(fs: Filesystem, handle: InvocationHandle, extension: str = ".vtt") -> SubtitleCandidate:
    """
    Scan, parse and rank the files written for an invocation.

    Raises:
        NoTranscriptFoundError: no file matched the handle's prefix
        NoReadableTranscriptError: every matching file failed to parse
    """
    files = find_candidate_files(fs, handle, extension)
    if not files:
        raise NoTranscriptFoundError("No transcript found.")

    selected = pick_best_subtitle(fs, handle.directory, files)
    if selected is None:
        raise NoReadableTranscriptError("No readable transcript found.")

    logging.info(f"Reading subtitle file: {selected.file_name} ({len(files)} candidate(s))")
    return selected

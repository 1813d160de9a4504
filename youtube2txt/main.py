"""
Command line entry point for youtube2txt.
"""

import argparse
import json
import asyncio
import sys
from typing import Optional

from dotenv import load_dotenv

from youtube2txt.core.transcript_service import TranscriptService, build_extractor_settings
from youtube2txt.utils.error_handling import ConfigurationError, TranscriptError
from youtube2txt.utils.helpers import extract_video_id, save_json, segments_to_text
from youtube2txt.utils.logger import logging


async def fetch_transcript(video_id: str, lang: Optional[str] = None) -> dict:
    """Fetch a transcript as plain data (title plus text segments)."""
    service = TranscriptService(build_extractor_settings())
    result = await service.get_transcript(video_id, lang)
    return {
        "title": result["title"],
        "segments": [{"text": cue.text} for cue in result["segments"]],
    }


async def list_languages(video_id: str) -> dict:
    """Return the default language and the available caption languages."""
    service = TranscriptService(build_extractor_settings())
    result = await service.get_languages(video_id)
    return {
        "defaultLang": result["default_lang"],
        "languages": [
            {"code": option.code, "name": option.name, "isAuto": option.is_auto}
            for option in result["languages"]
        ],
    }


def main(argv=None) -> int:
    """Main function to run the application from command line."""
    parser = argparse.ArgumentParser(description="Extract the transcript of a YouTube video")
    parser.add_argument("video", help="YouTube video URL or 11 character video ID")
    parser.add_argument("--lang", help="Caption language code(s), e.g. en or en,en-US")
    parser.add_argument("--output", help="Write the transcript to this file instead of stdout")
    parser.add_argument("--json", action="store_true", help="Emit JSON instead of plain text")
    parser.add_argument("--list-languages", action="store_true",
                        help="List available caption languages and exit")

    args = parser.parse_args(argv)

    # Load environment variables
    load_dotenv()

    video_id = extract_video_id(args.video)
    if not video_id:
        print(f"Could not find a video ID in: {args.video}", file=sys.stderr)
        return 2

    try:
        if args.list_languages:
            languages = asyncio.run(list_languages(video_id))
            for option in languages["languages"]:
                marker = "*" if option["code"] == languages["defaultLang"] else " "
                auto = " (auto)" if option["isAuto"] else ""
                print(f"{marker} {option['code']}\t{option['name']}{auto}")
            return 0

        transcript = asyncio.run(fetch_transcript(video_id, args.lang))
    except TranscriptError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1
    except ConfigurationError as e:
        print(f"Configuration error: {str(e)}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        logging.info("Interrupted")
        return 130

    if args.output and args.json:
        save_json(transcript, args.output)
    elif args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(segments_to_text(transcript["segments"]) + "\n")
    elif args.json:
        print(json.dumps(transcript, indent=2, ensure_ascii=False))
    else:
        print("=" * 80)
        print(transcript["title"])
        print("=" * 80)
        print(segments_to_text(transcript["segments"]))

    if args.output:
        logging.info(f"Transcript saved to: {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

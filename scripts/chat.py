"""
Terminal chat loop for the movie assistant.

Runs the pipeline in-process and carries the returned context into the next
turn, so follow-up answers like "8+" refine the previous search.

Usage:
    python -m scripts.chat                   # mode from ASSISTANT_MODE (default: llm)
    python -m scripts.chat --mode keyword    # offline, uses the static catalog
"""

import argparse  # command-line options
from dataclasses import replace  # override settings from flags

from loguru import logger  # console logging

from movie_assistant.assistant import build_assistant  # pipeline wiring
from movie_assistant.config import MODES, Settings, configure_logging  # env settings


def format_result(i: int, item: dict) -> str:
	title = item.get('primaryTitle') or item.get('title') or item.get('originalTitle') or '?'
	year = item.get('year') or item.get('startYear') or '----'
	rating = item.get('imdbRating') or item.get('averageRating') or 'N/A'
	return f"  {i:>2}. {title} ({year})  * {rating}"


def main():
	parser = argparse.ArgumentParser(description="Chat with the movie assistant")
	parser.add_argument('--mode', choices=MODES, help="override ASSISTANT_MODE")
	parser.add_argument('--catalog', help="catalog file for keyword mode")
	args = parser.parse_args()

	settings = Settings.from_env()
	if args.mode:
		settings = replace(settings, mode=args.mode)
	if args.catalog:
		settings = replace(settings, catalog_path=args.catalog)
	configure_logging(settings.log_level)

	assistant = build_assistant(settings)
	logger.info(f"[Chat] Assistant ready in '{settings.mode}' mode. Empty line or Ctrl-D to quit.")

	context = None  # previous turn's filters
	while True:
		try:
			text = input("You: ")
		except EOFError:
			break
		if not text.strip():
			break
		response = assistant.ask(text, context=context)
		context = response.context
		print(f"Dobby: {response.summary}")
		for i, item in enumerate(response.results, 1):
			print(format_result(i, item))
		if response.followup:
			print(f"Dobby: {response.followup}")


if __name__ == '__main__':
	main()

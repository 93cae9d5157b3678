"""Entry point for chytanka CLI client."""

import argparse
import asyncio
import logging
import sys

from core.capture import MediaCaptureSession
from core.config import DEFAULT_SERVER_URL
from core.errors import ServiceError
from core.game import GameController
from core.playback import AudioPlaybackAdapter
from core.recency import RecencyStore
from cli.api_client import ChytankaAPIClient
from cli.console import ConsoleUI
from cli.devices import SoundDeviceCapture, SoundDevicePlayback
from server.file_storage import FileStorage


def main():
    parser = argparse.ArgumentParser(description='Chytanka - syllable reading game')
    parser.add_argument(
        '--server',
        default=DEFAULT_SERVER_URL,
        help=f'Server URL (default: {DEFAULT_SERVER_URL})'
    )
    parser.add_argument(
        '--storage-file',
        default=None,
        help='Where to keep the recent words history (default: ~/.config/chytanka/storage.json)'
    )
    parser.add_argument(
        '--verbose',
        action='store_true',
        help='Show debug logging'
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s'
    )

    client = ChytankaAPIClient(base_url=args.server)
    try:
        health = client.health_check()
        print(f"Connected to chytanka server ({health.get('service')})")
    except ServiceError as e:
        print(f"Error: {e}")
        print("Make sure the server is running: python run_server.py")
        sys.exit(1)

    controller = GameController(
        provider=client,
        recency=RecencyStore(FileStorage(storage_file=args.storage_file)),
        capture=MediaCaptureSession(SoundDeviceCapture()),
        playback=AudioPlaybackAdapter(SoundDevicePlayback())
    )
    ui = ConsoleUI(controller)

    try:
        asyncio.run(ui.run())
    except KeyboardInterrupt:
        controller.shutdown()
        print('\nБувай!')
        sys.exit(0)


if __name__ == '__main__':
    main()

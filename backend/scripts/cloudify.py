"""
Command-line client: stylize a profile picture through a running Cloudify API.

Usage:
    python scripts/cloudify.py avatar.png --output avatar-cloud.png
    python scripts/cloudify.py avatar.jpg --api-url https://cloudify.example.com
"""

import argparse
import os
import sys
from pathlib import Path

# Load environment variables from .env
from dotenv import load_dotenv
env_path = Path(__file__).parent.parent / '.env'
load_dotenv(env_path)

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.intake_service import JPEG_QUALITY, MAX_SIDE, load_file
from services.transform_client import TransformClient, TransformSession


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Turn a profile picture into a stylized image")
    parser.add_argument("image", help="PNG, JPEG or WEBP file (up to ~6MB)")
    parser.add_argument("-o", "--output", help="Where to save the result (default: <image>-cloudified.png)")
    parser.add_argument("--api-url", default=os.getenv("CLOUDIFY_API_URL", "http://localhost:8000"),
                        help="Base URL of the Cloudify API")
    parser.add_argument("--max-side", type=int, default=MAX_SIDE, help="Longest side sent to the API")
    parser.add_argument("--quality", type=float, default=JPEG_QUALITY, help="JPEG quality between 0 and 1")
    parser.add_argument("--no-analytics", action="store_true", help="Do not send the usage beacon")
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    image_path = Path(args.image)
    output_path = Path(args.output) if args.output else image_path.with_name(f"{image_path.stem}-cloudified.png")

    if not image_path.is_file():
        print(f"❌ File not found: {image_path}")
        return 1

    client = TransformClient(args.api_url, send_analytics=not args.no_analytics)
    session = TransformSession(client, max_side=args.max_side, quality=args.quality)

    if not session.select(load_file(image_path)):
        print(f"❌ {session.error}")
        return 1

    print(f"☁️  Transforming {image_path.name} via {client.transform_url} ...")
    result = session.transform()
    if not result.success:
        print(f"❌ {result.error}")
        return 1

    session.save_result(output_path)
    print(f"✅ Saved {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Centrano Catalog Import

Usage:
    python3 main.py standardize page.html "Tilt Formula Deck"
    python3 main.py standardize page.html "Tilt Formula Deck" --out=output/record.json
    python3 main.py serve --port=3000
"""

import sys
import json
import logging
from pathlib import Path
from typing import Optional

from catalog.config import load_config

config = load_config()

# Setup logging
logging.basicConfig(
    level=getattr(logging, config.log_level, logging.INFO),
    format='%(asctime)s [%(levelname)s] %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger(__name__)

from catalog.processor import ProductProcessor
from catalog.schema import PipelineError
from scrapers.centrano.page_parser import parse_product_page


def cmd_standardize(page: str, search_term: str, out: Optional[str] = None) -> bool:
    """Standardize a saved product page and print or save the record."""
    path = Path(page)
    if not path.is_file():
        logger.error(f"Page not found: {path}")
        return False

    snapshot = parse_product_page(path.read_text(encoding='utf-8'))
    processor = ProductProcessor(config)

    try:
        record = processor.transform(snapshot, search_term, {'load': 'ok'})
    except PipelineError as e:
        logger.error(f"Failed: {e} (status: {e.status})")
        return False

    payload = json.dumps(record.to_dict(), ensure_ascii=False, indent=2)
    if out:
        output_file = Path(out)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(payload, encoding='utf-8')
        logger.info(f"Saved to {output_file}")
    else:
        print(payload)

    logger.info(f"{record.title}: {len(record.variants)} variants, stats={processor.get_stats()}")
    return True


def cmd_serve(port: int = 3000):
    """Run the HTTP API."""
    import uvicorn
    logger.info(f"Server listening on port {port}")
    uvicorn.run("api.main:app", host="0.0.0.0", port=port)


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    cmd = sys.argv[1]
    options = [a for a in sys.argv[2:] if a.startswith('--')]
    args = [a for a in sys.argv[2:] if not a.startswith('--')]

    if cmd == 'standardize':
        if len(args) < 2:
            print(__doc__)
            sys.exit(1)
        out = None
        for opt in options:
            if opt.startswith('--out='):
                out = opt.split('=', 1)[1]
        ok = cmd_standardize(args[0], ' '.join(args[1:]), out)
        sys.exit(0 if ok else 1)
    elif cmd == 'serve':
        port = 3000
        for opt in options:
            if opt.startswith('--port='):
                port = int(opt.split('=', 1)[1])
        cmd_serve(port)
    else:
        print(f"Unknown command: {cmd}")
        print(__doc__)
        sys.exit(1)


if __name__ == '__main__':
    main()

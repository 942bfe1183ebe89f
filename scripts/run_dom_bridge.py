#!/usr/bin/env python3
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

print(
    f"[bridge] controller={os.environ.get('WS_DOM_URL', 'ws://localhost:8765')} | "
    f"mode={os.environ.get('WS_DOM_BROWSER_MODE', 'launch')} | "
    f"binary={os.environ.get('WS_DOM_BROWSER_BINARY', 'auto')} | "
    f"port={os.environ.get('WS_DOM_CDP_PORT', '9222')}",
    file=sys.stderr,
)

from ws_dom_controller.main import main  # noqa: E402

if __name__ == "__main__":
    main()

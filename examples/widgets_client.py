"""
Example: a concrete REST client built on restpipe.

The client embeds a pipeline and only writes endpoint methods.

Usage:
    export WIDGETS_BASE_URL=https://widgets.example.com/api
    export WIDGETS_TOKEN=sk_test_...
    python examples/widgets_client.py
"""

import logging
import os
from typing import Any, Dict, List, Optional

from restpipe import BearerTokenPipeline, ClientConfig, HTTPStatusError
from restpipe.logging_setup import setup_structured_logger


class WidgetsClient:
    """Client for a small widgets API."""

    def __init__(self, config: ClientConfig, token: str, logger: Optional[logging.Logger] = None):
        self.pipeline = BearerTokenPipeline(config, token=token, logger=logger)

    def list_widgets(self, color: Optional[str] = None, tags: Optional[List[str]] = None) -> List[Dict]:
        return self.pipeline.get("/widgets", query={"color": color, "tag": tags or []}) or []

    def get_widget(self, widget_id: int) -> Optional[Dict[str, Any]]:
        """Return the widget, or None if it does not exist."""
        return self.pipeline.get(f"/widgets/{widget_id}")

    def create_widget(self, color: str, **fields: Any) -> Dict[str, Any]:
        return self.pipeline.post("/widgets", {"color": color, **fields})

    def update_widget(self, widget_id: int, **fields: Any) -> Dict[str, Any]:
        return self.pipeline.patch(f"/widgets/{widget_id}", fields)

    def delete_widget(self, widget_id: int) -> None:
        self.pipeline.delete(f"/widgets/{widget_id}")

    def download_manual(self, widget_id: int) -> Optional[bytes]:
        return self.pipeline.get(
            f"/widgets/{widget_id}/manual",
            headers={"accept": "application/pdf"},
            deserializer=None,
        )

    def close(self) -> None:
        self.pipeline.close()


def main() -> None:
    log = setup_structured_logger(logging.DEBUG)
    config = ClientConfig.from_env("WIDGETS_", retries=2, retry_backoff=0.5)
    client = WidgetsClient(config, token=os.getenv("WIDGETS_TOKEN", ""), logger=log)

    try:
        widget = client.create_widget("blue", size="m")
        print(f"Created widget {widget['id']}")
        print(client.list_widgets(color="blue"))
        print(client.get_widget(404))
    except HTTPStatusError as e:
        print(f"API error {e.status_code}: {e.text}")
    finally:
        client.close()


if __name__ == "__main__":
    main()

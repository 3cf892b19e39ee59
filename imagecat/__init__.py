"""Image catalog service: metadata and encoded payloads for images."""

"""Cross-cutting helpers: telemetry, datetime and id generation."""

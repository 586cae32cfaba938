"""Theme submission service: upload endpoint, theme metadata store and moderation API."""

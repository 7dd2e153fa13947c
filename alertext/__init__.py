"""Alert-routing extensions: search-index documents and a voice-call channel."""

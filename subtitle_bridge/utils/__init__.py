"""Supporting utilities: config file, language detection and reports."""

"""SendGrid email action plugin for host integration frameworks."""

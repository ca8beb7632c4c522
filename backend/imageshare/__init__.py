"""ImageShare: image sharing web application."""

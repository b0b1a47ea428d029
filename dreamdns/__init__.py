"""dreamdns - keep DreamHost DNS records pointed at this machine's external IP."""

__version__ = "0.1.0"

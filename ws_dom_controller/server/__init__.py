"""Command server package: envelopes, registry, correlation.

Keep this package import light: importing `ws_dom_controller.server.*` should not
eagerly pull the handler registry (tools import `server.types`).
"""

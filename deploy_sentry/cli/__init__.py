"""Command line interface for deploy-sentry"""

"""Command line interface for webapp-publisher"""

"""Subcommands for the forcebubbles CLI"""

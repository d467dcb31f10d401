"""
Database schema package for GuildStay.
"""

"""
GuildStay core infrastructure: configuration, logging, and database access.
"""

"""
GuildStay domain modules.

- shared: base service/repository, exceptions, formulas, constants
- guild: guild context resolution
- achievement: recommendation point awards and the guild score ledger
- stay, recommendation, location: data access for the stores they name
"""

"""Domain layer for Patriot Thanks.

Pure incentive evaluation, school domain resolution and validation rules.
This layer has no dependencies on infrastructure concerns.
"""

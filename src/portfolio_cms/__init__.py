"""
Portfolio CMS - content pipeline for a spreadsheet-driven portfolio site.

    portfolio_cms.core       errors, logging, settings, rejects
    portfolio_cms.content    tokenizer, normalizer, hierarchy, filtering, markdown
    portfolio_cms.cli        portfolio-cms command line
"""

__version__ = "0.1.0"

"""
Page-specific field mappings.

  curse       -- legacy project pages (one page per project)
  curseforge  -- successor platform (overview, files and images sub-pages)
"""

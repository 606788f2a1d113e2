"""
Review Store.

Review records stored at addresses derived from their owner and title.
"""

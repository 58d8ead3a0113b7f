"""newsHub - 多源新闻标题聚合。"""

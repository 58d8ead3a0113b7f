"""Feeds module: 新闻源注册、抓取、解析与调度。"""

"""ImageGlider の HTTP API。"""

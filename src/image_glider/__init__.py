"""画像の一括変換・リサイズ・切り抜き・透かし・色調整ツールキット。"""

__version__ = "0.3.0"

from . import color, compress, convert, crop, download, info, metadata, resize, watermark

__all__ = ["color", "compress", "convert", "crop", "download", "info", "metadata", "resize", "watermark"]

import cv2
import numpy as np

from .geometry import Rect


def crop_transform(rect: Rect, out_width: int, out_height: int) -> np.ndarray:
    """Afín 2x3 que lleva la ventana de encuadre al frame de salida completo."""
    src = np.array([
        [rect.x, rect.y],
        [rect.x, rect.bottom],
        [rect.right, rect.bottom]
    ], dtype=np.float32)
    dst = np.array([
        [0, 0],
        [0, out_height],
        [out_width, out_height]
    ], dtype=np.float32)
    return cv2.getAffineTransform(src, dst)


def apply_framing(image: np.ndarray, rect: Rect, out_width: int, out_height: int) -> np.ndarray:
    if rect.is_empty():
        raise ValueError(f"Cannot crop to an empty rectangle: {rect}")

    xfrm = crop_transform(rect, out_width, out_height)
    return cv2.warpAffine(
        image,
        xfrm,
        (out_width, out_height),
        flags=cv2.INTER_LINEAR,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=0
    )

"""Output mapping and Matplotlib preview for rendered images.

The renderer works in linear, unclamped radiance. Turning that into display
values happens only here, in one step per channel:

    pixel = trunc(255 * sqrt(clamp(radiance, 0, 1)))

The square root is a gamma-2 encoding, a cheap stand-in for the sRGB curve.

Example:
    >>> import numpy as np
    >>> from spheretracer.preview.display import to_pixels
    >>> to_pixels(np.array([[[0.0, 0.25, 4.0]]], dtype=np.float32))
    array([[[  0, 127, 255]]], dtype=uint8)
"""

from __future__ import annotations

import numpy as np
import numpy.typing as npt


def apply_gamma(radiance: npt.NDArray[np.float32]) -> npt.NDArray[np.float32]:
    """Clamp linear radiance to [0, 1] and apply square-root gamma.

    Args:
        radiance: Linear image array of shape (H, W, 3).

    Returns:
        Gamma encoded image in [0, 1].
    """
    # Clamp before the square root to avoid NaN from negative values
    clamped = np.clip(radiance, 0.0, 1.0)
    return np.sqrt(clamped).astype(np.float32)


def to_pixels(
    radiance: npt.NDArray[np.float32],
    out: npt.NDArray[np.uint8] | None = None,
) -> npt.NDArray[np.uint8]:
    """Map linear radiance to 8-bit channels.

    Args:
        radiance: Linear image array of shape (H, W, 3).
        out: Optional preallocated uint8 array of the same shape to write to.

    Returns:
        uint8 array of shape (H, W, 3); `out` itself when given.
    """
    scaled = apply_gamma(radiance) * 255.0
    if out is None:
        return scaled.astype(np.uint8)
    # Unsafe casting truncates toward zero, matching the integer conversion
    np.copyto(out, scaled, casting="unsafe")
    return out


def show_preview(
    framebuffer: npt.NDArray[np.uint8],
    *,
    title: str | None = None,
    figsize: tuple[float, float] = (8, 4.5),
    block: bool = True,
) -> None:
    """Display a rendered framebuffer as a Matplotlib figure.

    Args:
        framebuffer: uint8 image of shape (H, W, 3).
        title: Figure title (default shows the image size).
        figsize: Figure size in inches (width, height).
        block: Whether to block execution until the figure is closed.
    """
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(1, 1, figsize=figsize)

    ax.imshow(framebuffer)
    ax.axis("off")

    if title is None:
        height, width = framebuffer.shape[:2]
        title = f"Render Preview - {width}x{height}"
    ax.set_title(title)

    plt.tight_layout()
    plt.show(block=block)

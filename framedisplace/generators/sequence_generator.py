"""Sequence Generator: render a displaced copy of a whole frame sequence."""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Dict, Optional

from tqdm import tqdm

from ..core import (
    DisplaceConfig,
    FrameIOError,
    FrameStore,
    PreconditionViolation,
    RasterBuffer,
    RenderError,
    displace,
    frame_filename,
)
from ..codecs import RasterCodec

logger = logging.getLogger(__name__)


class SequenceGenerator:
    """Load an input sequence once and write one displaced frame per index.

    Output frame ``i`` (0-based) is written to ``frame_filename(i + 1)`` in
    the output directory. Workers share the read-only :class:`FrameStore`
    and each one renders into its own buffer.
    """

    def __init__(self, config: Optional[DisplaceConfig] = None, store: Optional[FrameStore] = None):
        """Initialize generator.

        Args:
            config: DisplaceConfig (uses defaults if None)
            store: already loaded frames; loaded from ``config.input_dir`` if None
        """
        self.config = (config or DisplaceConfig()).validate()
        self.output_dir = Path(self.config.output_dir)
        self._store = store

    def load(self, progress: bool = False) -> FrameStore:
        """Load (once) and return the input frames."""
        if self._store is None:
            frame_count = self.config.resolve_frame_count()
            if frame_count <= 0:
                first = Path(self.config.input_dir) / frame_filename(1, self.config.extension)
                raise FrameIOError(f"{first}: no such file", first)
            self._store = FrameStore.load(
                self.config.input_dir,
                frame_count,
                extension=self.config.extension,
                num_workers=self.config.num_workers,
                progress=progress,
            )
        return self._store

    def render(self, frame_index: int, output: Optional[RasterBuffer] = None) -> RasterBuffer:
        """Render output frame ``frame_index`` into ``output`` (or a new buffer)."""
        store = self.load()
        if output is None:
            output = store.allocate_output()
        displace(
            self.config.strategy,
            store,
            frame_index,
            output,
            step=self.config.step,
            tail=self.config.tail,
        )
        return output

    def output_path(self, frame_index: int) -> Path:
        return self.output_dir / frame_filename(frame_index + 1, self.config.extension)

    def _render_and_save(self, frame_index: int, output: Optional[RasterBuffer] = None) -> Path:
        path = self.output_path(frame_index)
        try:
            RasterCodec.save(path, self.render(frame_index, output))
        except PreconditionViolation:
            raise
        except Exception as e:
            raise RenderError(frame_index, path, e) from e
        logger.debug("Wrote %s", path)
        return path

    def generate(
        self,
        num_workers: Optional[int] = None,
        progress: bool = True,
        skip_existing: bool = False,
    ) -> Dict[str, Any]:
        """Render and save every output frame.

        The first failure stops the run and propagates; frames already
        written stay on disk.

        Args:
            num_workers: parallel render threads (config value if None)
            progress: show progress bars
            skip_existing: leave output frames that already exist untouched

        Returns:
            dict with generation statistics
        """
        if num_workers is None:
            num_workers = self.config.num_workers
        store = self.load(progress=progress)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise FrameIOError(f"{self.output_dir}: {e}", self.output_dir) from e

        indices = [
            i for i in range(len(store))
            if not (skip_existing and self.output_path(i).exists())
        ]
        results = {
            "total": len(store),
            "processed": 0,
            "skipped": len(store) - len(indices),
            "output_dir": str(self.output_dir),
        }
        logger.info(
            "Displacing %d frames (%s, step=%d) into %s",
            len(indices), self.config.strategy, self.config.step, self.output_dir,
        )

        if num_workers <= 1:
            # One scratch buffer reused for the whole run; displace() clears it.
            output = store.allocate_output()
            iterator = tqdm(indices, desc="Displacing") if progress else indices
            for i in iterator:
                self._render_and_save(i, output)
                results["processed"] += 1
        else:
            with ThreadPoolExecutor(max_workers=num_workers) as executor:
                futures = {executor.submit(self._render_and_save, i): i for i in indices}

                iterator = tqdm(as_completed(futures), total=len(futures), desc="Displacing") if progress else as_completed(futures)
                try:
                    for future in iterator:
                        future.result()
                        results["processed"] += 1
                except BaseException:
                    for future in futures:
                        future.cancel()
                    raise

        return results

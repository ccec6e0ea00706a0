# Copyright (C) 2025 Gil Benezer
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published
# by the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""
Unit Tests for Snapshot Exporters

Tests cover:
1. OVITO frame layout
2. Movement file layout
3. Position flattening
4. File handling (parent directories, return value)
5. Abstract exporter base
"""

import numpy as np
import pytest

from oscsym.io.exporters import (
    MovementExporter,
    OvitoExporter,
    _TextExporter,
    flatten_positions,
)
from oscsym.types.core import Vector2D
from oscsym.types.trajectories import StateSnapshot

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def snapshots():
    return [
        StateSnapshot(1.0, Vector2D(1.0, 0.0), Vector2D(0.0, 0.0), Vector2D(-1.0, 0.0), 0.0, 0),
        StateSnapshot(1.0, Vector2D(0.5, 0.0), Vector2D(-0.25, 0.0), Vector2D(-0.5, 0.0), 0.1, 1),
        StateSnapshot(1.0, Vector2D(-0.125, 0.0), Vector2D(-1.5, 0.0), Vector2D(0.125, 0.0), 0.2, 2),
    ]


# ============================================================================
# Test Class 1: OVITO
# ============================================================================


class TestOvitoExporter:
    """Test OVITO frame output"""

    def test_format_frame(self, snapshots):
        text = OvitoExporter.format_frame(snapshots[1], 7)
        assert text == (
            "4\n"
            "7\n"
            "0.5 0.0 -0.25 0.0\n"
            "0 0 0 0\n"
            "100 0 0 0\n"
            "-100 0 0 0\n"
        )

    def test_save_writes_one_block_per_snapshot(self, tmp_path, snapshots):
        path = OvitoExporter(tmp_path / "ovito.xyz").save(snapshots)
        lines = path.read_text().splitlines()
        assert len(lines) == 6 * len(snapshots)
        # Frame index line of each block
        assert [lines[i] for i in range(1, len(lines), 6)] == ["0", "1", "2"]
        assert lines[8] == "0.5 0.0 -0.25 0.0"
        assert lines[-1] == "-100 0 0 0"

    def test_creates_parent_directories(self, tmp_path, snapshots):
        target = tmp_path / "nested" / "dir" / "ovito.xyz"
        returned = OvitoExporter(target).save(snapshots)
        assert returned == target
        assert target.exists()

    def test_empty_sequence(self, tmp_path):
        path = OvitoExporter(tmp_path / "empty.xyz").save([])
        assert path.read_text() == ""


# ============================================================================
# Test Class 2: Movement
# ============================================================================


class TestMovementExporter:
    """Test MATLAB/Octave movement output"""

    def test_render(self, snapshots):
        text = MovementExporter("unused.m").render(snapshots)
        assert text == "x = [1.0, 0.5, -0.125];\ny = [0.0, 0.0, 0.0];\n"

    def test_save(self, tmp_path, snapshots):
        path = MovementExporter(str(tmp_path / "out" / "movement.m")).save(snapshots)
        lines = path.read_text().splitlines()
        assert lines[0].startswith("x = [")
        assert lines[1].startswith("y = [")
        assert lines[0].endswith("];")

    def test_empty_sequence(self):
        assert MovementExporter("unused.m").render([]) == "x = [];\ny = [];\n"

    def test_repr(self):
        assert "movement.m" in repr(MovementExporter("movement.m"))


# ============================================================================
# Test Class 3: Flattening
# ============================================================================


class TestFlattenPositions:
    def test_arrays(self, snapshots):
        arrays = flatten_positions(snapshots)
        np.testing.assert_array_equal(arrays["x"], [1.0, 0.5, -0.125])
        np.testing.assert_array_equal(arrays["y"], [0.0, 0.0, 0.0])

    def test_empty(self):
        arrays = flatten_positions([])
        assert arrays["x"].shape == (0,)
        assert arrays["y"].shape == (0,)

    def test_accepts_generator(self, snapshots):
        arrays = flatten_positions(s for s in snapshots)
        assert len(arrays["x"]) == 3


# ============================================================================
# Test Class 4: Exporter Base
# ============================================================================


class TestTextExporterBase:
    def test_base_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            _TextExporter("out.txt")

    def test_subclass_must_render(self):
        class Incomplete(_TextExporter):
            pass

        with pytest.raises(TypeError):
            Incomplete("out.txt")

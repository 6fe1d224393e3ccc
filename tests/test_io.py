from src.takuzu.model import Grid
from src.utils.io import load_grid, save_grid, write_text


def test_save_then_load_grid(tmp_path):
    grid = Grid.from_rows(["0_1_", "____", "1___", "___0"])
    path = tmp_path / "nested" / "grid.txt"
    save_grid(path, grid)
    assert path.read_text() == "0 _ 1 _\n_ _ _ _\n1 _ _ _\n_ _ _ 0\n"
    assert load_grid(path) == grid


def test_write_text_creates_parent_dirs(tmp_path):
    path = tmp_path / "a" / "b" / "out.txt"
    write_text(path, "hello\n")
    assert path.read_text() == "hello\n"

import os

import pytest

from npm_buttons.runs.keys import RunKey, decode, encode, label, relative_display


@pytest.mark.parametrize("directory, script", [
    ("/repo", "build"),
    ("/repo/packages/web", "test:unit"),
    ("/repo with space", "lint"),
    ("", "dev"),
])
def test_encode_decode_identity(directory, script):
    assert decode(encode(directory, script)) == (directory, script)


def test_decode_splits_on_first_separator():
    assert decode("/repo::build::watch") == ("/repo", "build::watch")


def test_decode_rejects_key_without_separator():
    with pytest.raises(ValueError):
        decode("/repo/build")


def test_label_for_root_and_sub_package():
    assert label("/repo", "build", "/repo") == "build"
    assert label("/repo/", "build", "/repo") == "build"
    assert label("/repo/packages/web", "test", "/repo") == "web:test"


def test_relative_display():
    root = os.path.abspath("/repo")
    assert relative_display(root, root) == "."
    assert relative_display(os.path.join(root, "packages", "web"), root) == "packages/web"


def test_relative_display_outside_root_is_absolute():
    root = os.path.abspath("/repo")
    outside = os.path.abspath("/elsewhere/pkg")
    assert relative_display(outside, root) == outside
    assert relative_display(outside, "") == outside
    assert relative_display(os.path.abspath("/repo-other"), root) == os.path.abspath("/repo-other")


def test_relative_and_absolute_keys_collide(tmp_path):
    root = str(tmp_path)
    relative = RunKey.parse("pkgA::test", root)
    absolute = RunKey.parse(f"{os.path.join(root, 'pkgA')}::test", root)
    dotted = RunKey.parse(f"{root}/./pkgA/../pkgA::test", root)
    assert relative == absolute == dotted
    assert relative.canonical == f"{os.path.join(root, 'pkgA')}::test"


def test_empty_directory_resolves_to_root(tmp_path):
    key = RunKey.parse("::build", str(tmp_path))
    assert key.package_dir == str(tmp_path)
    assert key.label(str(tmp_path)) == "build"
    assert key.relative_path(str(tmp_path)) == "."

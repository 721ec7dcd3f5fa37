"""Tests cho WatchedExtensionStrategy."""

import pytest

from services.file_watcher_pkg.ignore_strategies import WatchedExtensionStrategy


class TestWatchedExtensionStrategy:
    @pytest.mark.parametrize(
        "path",
        ["/srv/site/index.html", "/srv/site/css/site.css", "/srv/site/js/app.js"],
    )
    def test_web_assets_are_watched(self, path):
        assert WatchedExtensionStrategy().should_ignore(path) is False

    @pytest.mark.parametrize(
        "path",
        [
            "/srv/site/logo.png",
            "/srv/site/README",
            "/srv/site/index.html.swp",
            "/srv/site/.index.html~",
            "/srv/site/data.json",
        ],
    )
    def test_other_files_are_ignored(self, path):
        assert WatchedExtensionStrategy().should_ignore(path) is True

    def test_extension_match_is_case_sensitive(self):
        assert WatchedExtensionStrategy().should_ignore("/srv/INDEX.HTML") is True

    def test_custom_extensions_without_dot(self):
        strategy = WatchedExtensionStrategy(["svg", ".json"])
        assert strategy.should_ignore("/srv/icon.svg") is False
        assert strategy.should_ignore("/srv/data.json") is False
        assert strategy.should_ignore("/srv/index.html") is True

"""Static download option menu.

仅用于展示：与条目无关，也不从转换服务获取。
"""

from dataclasses import dataclass

from src.modules.conversion.domain.entities import MediaKind


@dataclass(frozen=True)
class DownloadOption:
    quality: str
    label: str
    format: str
    size: str


@dataclass(frozen=True)
class DownloadOptions:
    video: tuple[DownloadOption, ...]
    audio: tuple[DownloadOption, ...]

    def for_kind(self, media_kind: MediaKind) -> tuple[DownloadOption, ...]:
        return self.video if media_kind == MediaKind.VIDEO else self.audio

    def supports(self, media_kind: MediaKind, quality_tier: str) -> bool:
        return any(opt.quality == quality_tier for opt in self.for_kind(media_kind))


DOWNLOAD_OPTIONS = DownloadOptions(
    video=(
        DownloadOption("720p", "HD Video (720p)", "mp4", "~120MB"),
        DownloadOption("480p", "Standard Video (480p)", "mp4", "~80MB"),
        DownloadOption("360p", "Mobile Video (360p)", "mp4", "~50MB"),
    ),
    audio=(
        DownloadOption("320kbps", "High Quality Audio (320kbps)", "mp3", "~40MB"),
        DownloadOption("192kbps", "Good Quality Audio (192kbps)", "mp3", "~25MB"),
        DownloadOption("128kbps", "Standard Audio (128kbps)", "mp3", "~15MB"),
        DownloadOption("mp3", "MP3 Format", "mp3", "~40MB"),
    ),
)

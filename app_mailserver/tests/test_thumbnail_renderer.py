"""
单元测试：ThumbnailRenderer 缩略图渲染

测试覆盖：
- 按比例缩放到 200x200 以内
- 小图不放大
- 输出 PNG，支持非 PNG 模式的输入
"""
import io
from unittest import TestCase

from PIL import Image

from app_mailserver.services.thumbnail_renderer import ThumbnailRenderer, THUMBNAIL_BOX
from app_mailserver.tests.mail_fixtures import build_png


class TestThumbnailRenderer(TestCase):
    """测试 ThumbnailRenderer"""

    def setUp(self):
        """每个测试前设置"""
        self.renderer = ThumbnailRenderer()

    @staticmethod
    def _open(data: bytes) -> Image.Image:
        image = Image.open(io.BytesIO(data))
        image.load()
        return image

    def test_downscale_keeps_aspect_ratio(self):
        """测试缩小并保持宽高比"""
        result = self._open(self.renderer.render_thumbnail(build_png((800, 400))))

        self.assertEqual(result.format, 'PNG')
        self.assertEqual(result.size, (200, 100))

    def test_small_image_not_enlarged(self):
        """测试小图不放大"""
        result = self._open(self.renderer.render_thumbnail(build_png((50, 30))))

        self.assertEqual(result.size, (50, 30))

    def test_default_box(self):
        """测试默认尺寸"""
        self.assertEqual(THUMBNAIL_BOX, (200, 200))
        result = self._open(self.renderer.render_thumbnail(build_png((300, 900))))
        self.assertLessEqual(result.size[0], 200)
        self.assertEqual(result.size[1], 200)

    def test_jpeg_and_cmyk_input(self):
        """测试 JPEG 与 CMYK 输入转换为 PNG"""
        output = io.BytesIO()
        Image.new('CMYK', (400, 400), (0, 255, 255, 0)).save(output, format='JPEG')

        result = self._open(self.renderer.render_thumbnail(output.getvalue()))

        self.assertEqual(result.format, 'PNG')
        self.assertEqual(result.size, (200, 200))

    def test_invalid_image_data(self):
        """测试无效图片数据抛出异常"""
        with self.assertRaises(OSError):
            self.renderer.render_thumbnail(b'not an image')

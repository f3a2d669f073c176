# Standard Blit
DEFAULT_VERT = """
#version 330
in vec2 in_pos;
in vec2 in_uv;
out vec2 uv;
void main() {
    gl_Position = vec4(in_pos, 0.0, 1.0);
    uv = in_uv;
}
"""

DEFAULT_FRAG = """
#version 330
in vec2 uv;
out vec4 fragColor;
uniform sampler2D tex;
void main() {
    fragColor = texture(tex, uv);
}
"""

# Soft bloom + vignette, keeps the scene warm without washing out text
GLOW_FRAG = """
#version 330
in vec2 uv;
out vec4 fragColor;
uniform sampler2D tex;
uniform vec2 resolution;
uniform float intensity;

void main() {
    vec4 base = texture(tex, uv);
    vec2 px = 1.0 / max(resolution, vec2(1.0));

    vec3 glow = vec3(0.0);
    float total = 0.0;
    for (int x = -3; x <= 3; x++) {
        for (int y = -3; y <= 3; y++) {
            float w = 1.0 / (1.0 + float(x * x + y * y));
            vec3 s = texture(tex, uv + vec2(x, y) * px * 3.0).rgb;
            glow += max(s - 0.55, 0.0) * w;
            total += w;
        }
    }
    glow /= total;

    vec2 p = uv * 2.0 - 1.0;
    float vig = 1.0 - dot(p, p) * 0.15;

    fragColor = vec4((base.rgb + glow * intensity) * vig, base.a);
}
"""

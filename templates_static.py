"""Templates and static file generation."""

from pathlib import Path
from typing import Optional

# Template content
INDEX_HTML = """<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{{ title or 'Photos' }}</title>
  <link rel="stylesheet" href="{{ prefix }}/static/app.css">
</head>
<body>
  <header class="topbar">
    <nav>
      <span class="brand">📷 {{ title or 'Photos' }}</span>
      <button type="button" id="uploadButton" title="Upload (u)">Upload</button>
    </nav>
  </header>
  <main class="container">
    <div id="gallery" class="grid" aria-live="polite"></div>
  </main>

  <div id="modal" class="modal hidden" aria-hidden="true" role="dialog" aria-labelledby="uploadTitle">
    <div class="modal-body">
      <button type="button" id="closeModal" class="close" aria-label="Close">×</button>
      <h2 id="uploadTitle">Upload photos</h2>
      <form id="uploadForm">
        <label for="token">Upload token</label>
        <input type="password" id="token" name="token" autocomplete="current-password" required />
        <label for="photo">Images (up to {{ max_files }})</label>
        <input type="file" id="photo" name="photo" accept=".jpg,.jpeg,.png,.gif,.webp" multiple required />
        <div class="actions">
          <button type="button" id="cancelUpload">Cancel</button>
          <button type="submit">Upload</button>
        </div>
      </form>
    </div>
  </div>

  <div id="imageModal" class="modal hidden" aria-hidden="true" role="dialog">
    <div class="lightbox">
      <button type="button" id="closeImageModal" class="close" aria-label="Close">×</button>
      <img id="modalImage" alt="Preview" />
      <div class="actions">
        <button type="button" id="deletePhoto" class="danger">🗑️ Delete</button>
      </div>
    </div>
  </div>

  <div id="toast" class="toast" role="status"></div>
  <script src="{{ prefix }}/static/script.js"></script>
</body>
</html>
"""

APP_CSS = """:root{--bg:#0f1115;--fg:#e5e7eb;--muted:#a1a1aa;--card:#111318;--brand:#7aa2ff;--danger:#ff5c5c}
*{box-sizing:border-box}body{margin:0;background:var(--bg);color:var(--fg);font:15px/1.45 system-ui,-apple-system,Segoe UI,Roboto,Inter,Ubuntu,Helvetica,Arial}
.topbar{position:sticky;top:0;background:#0c0e13;border-bottom:1px solid #1c1f26;z-index:10}
.topbar nav{margin:auto;display:flex;gap:14px;align-items:center;padding:10px}
.topbar .brand{font-weight:700;margin-right:auto}
.container{margin:20px auto;padding:0 14px}
.grid{display:grid;grid-template-columns:repeat(auto-fill,minmax(220px,1fr));gap:14px}
.month-divider{grid-column:1/-1;font-weight:600;color:var(--muted);border-bottom:1px solid #1f2430;padding:6px 0}
.photo-item{margin:0;background:var(--card);border:1px solid #1f2430;border-radius:12px;overflow:hidden}
.photo-item img{width:100%;height:240px;object-fit:cover;display:block;background:#090a0d;cursor:zoom-in}
.caption{padding:6px 10px;color:var(--muted);font-size:13px}
button{cursor:pointer;background:#1e2635;border:1px solid #2f3748;color:var(--fg);padding:6px 12px;border-radius:8px}
button.danger{background:#3a1313;border-color:#5b1a1a;color:#ffd5d5}
input{background:#0e1218;border:1px solid #232a39;color:var(--fg);padding:6px 10px;border-radius:8px;width:100%;margin:4px 0 12px}
.modal{position:fixed;inset:0;background:rgba(0,0,0,.75);display:flex;align-items:center;justify-content:center;z-index:20}
.modal.hidden{display:none}
.modal-body{background:var(--card);border:1px solid #1f2430;border-radius:12px;padding:20px;width:min(420px,92vw);position:relative}
.lightbox{position:relative;max-width:94vw;max-height:94vh;display:flex;flex-direction:column;gap:10px;align-items:center}
.lightbox img{max-width:94vw;max-height:84vh;object-fit:contain;border-radius:8px}
.close{position:absolute;top:8px;right:8px;padding:2px 10px}
.actions{display:flex;gap:8px;justify-content:flex-end}
.toast{position:fixed;bottom:20px;left:50%;transform:translateX(-50%);background:#13221d;border:1px solid #214d39;padding:10px 16px;border-radius:10px;opacity:0;transition:opacity .2s;pointer-events:none;z-index:30}
.toast.show{opacity:1}.toast.error{background:#2d1b1b;border-color:#ef4444;color:#f87171}
"""

SCRIPT_JS = """/*
 * Gallery grid, upload modal and delete action.
 */
document.addEventListener('DOMContentLoaded', () => {
  const galleryEl = document.getElementById('gallery');
  const uploadButton = document.getElementById('uploadButton');
  const modalEl = document.getElementById('modal');
  const closeModal = document.getElementById('closeModal');
  const cancelUpload = document.getElementById('cancelUpload');
  const uploadForm = document.getElementById('uploadForm');
  const toastEl = document.getElementById('toast');
  const imageModal = document.getElementById('imageModal');
  const closeImageModal = document.getElementById('closeImageModal');
  const modalImage = document.getElementById('modalImage');
  const deleteButton = document.getElementById('deletePhoto');
  const prefix = window.location.pathname.startsWith('/photos') ? '/photos' : '';
  const monthNames = ['January', 'February', 'March', 'April', 'May', 'June',
                      'July', 'August', 'September', 'October', 'November', 'December'];
  let currentOriginal = null;

  function rememberedToken() {
    return sessionStorage.getItem('uploadToken') || '';
  }

  async function loadGallery() {
    try {
      const response = await fetch(`${prefix}/api/photos?meta=1`);
      if (!response.ok) {
        throw new Error('Failed to fetch photos');
      }
      const payload = await response.json();
      // Accept both ["a.jpg", ...] and [{original, thumb, date_taken}, ...]
      const items = Array.isArray(payload)
        ? payload.map(p => (typeof p === 'string' ? { original: p, thumb: null, date_taken: null } : p))
        : [];
      galleryEl.innerHTML = '';
      let lastMonthYear = null;

      items.forEach(item => {
        const original = item.original;
        let photoDate = item.date_taken ? new Date(item.date_taken) : null;
        if (photoDate && isNaN(photoDate.getTime())) {
          photoDate = null;
        }
        let dateLabel = '';
        if (photoDate) {
          const day = String(photoDate.getDate()).padStart(2, '0');
          const month = String(photoDate.getMonth() + 1).padStart(2, '0');
          dateLabel = `${day}/${month}/${photoDate.getFullYear()}`;
          const monthYear = `${photoDate.getFullYear()}-${photoDate.getMonth()}`;
          if (monthYear !== lastMonthYear) {
            const divider = document.createElement('div');
            divider.className = 'month-divider';
            divider.textContent = `${monthNames[photoDate.getMonth()]} - ${photoDate.getFullYear()}`;
            galleryEl.appendChild(divider);
            lastMonthYear = monthYear;
          }
        }

        const figure = document.createElement('figure');
        figure.className = 'photo-item';
        const img = document.createElement('img');
        // The server maps original names to thumbnails and generates missing ones
        img.src = `${prefix}/files/thumbs/${encodeURIComponent(item.thumb || original)}`;
        img.alt = original;
        img.loading = 'lazy';
        img.tabIndex = 0;
        if (dateLabel) {
          img.title = dateLabel;
          img.setAttribute('aria-label', `Photo taken ${dateLabel}`);
        }
        const originalUrl = `${prefix}/files/${encodeURIComponent(original)}`;
        img.onerror = () => {
          img.onerror = null;
          img.src = originalUrl;
        };
        img.addEventListener('click', () => openImageModal(originalUrl, original));
        img.addEventListener('keydown', e => {
          if (e.key === 'Enter' || e.key === ' ') {
            openImageModal(originalUrl, original);
          }
        });
        const caption = document.createElement('figcaption');
        caption.className = 'caption';
        caption.textContent = dateLabel || 'Unknown';
        figure.appendChild(img);
        figure.appendChild(caption);
        galleryEl.appendChild(figure);
      });
    } catch (err) {
      showToast(err.message || 'Error loading gallery', true);
    }
  }

  function showToast(message, isError = false) {
    toastEl.textContent = message;
    toastEl.classList.toggle('error', isError);
    toastEl.classList.add('show');
    setTimeout(() => toastEl.classList.remove('show'), 3000);
  }

  function openModal() {
    modalEl.classList.remove('hidden');
    modalEl.setAttribute('aria-hidden', 'false');
    const tokenInput = document.getElementById('token');
    tokenInput.value = rememberedToken();
    tokenInput.focus();
  }

  function closeModalFunc() {
    modalEl.classList.add('hidden');
    modalEl.setAttribute('aria-hidden', 'true');
    uploadForm.reset();
  }

  function openImageModal(src, original) {
    currentOriginal = original;
    modalImage.src = src;
    modalImage.alt = original || 'Preview';
    imageModal.classList.remove('hidden');
    imageModal.setAttribute('aria-hidden', 'false');
    closeImageModal.focus();
  }

  function closeImageModalFunc() {
    imageModal.classList.add('hidden');
    imageModal.setAttribute('aria-hidden', 'true');
    modalImage.src = '';
    currentOriginal = null;
  }

  async function deleteCurrent() {
    if (!currentOriginal || !confirm('Delete this photo? This cannot be undone.')) {
      return;
    }
    let token = rememberedToken();
    if (!token) {
      token = (prompt('Upload token') || '').trim();
      if (!token) {
        return;
      }
    }
    const response = await fetch(`${prefix}/api/photos/${encodeURIComponent(currentOriginal)}`, {
      method: 'DELETE',
      headers: { 'Authorization': 'Bearer ' + token }
    });
    const result = await response.json().catch(() => ({}));
    if (!response.ok) {
      if (response.status === 401) {
        sessionStorage.removeItem('uploadToken');
      }
      showToast(result.error || 'Delete failed', true);
      return;
    }
    sessionStorage.setItem('uploadToken', token);
    showToast('Photo deleted');
    closeImageModalFunc();
    loadGallery();
  }

  uploadButton.addEventListener('click', openModal);
  closeModal.addEventListener('click', closeModalFunc);
  cancelUpload.addEventListener('click', closeModalFunc);
  deleteButton.addEventListener('click', deleteCurrent);

  uploadForm.addEventListener('submit', event => {
    event.preventDefault();
    const token = document.getElementById('token').value.trim();
    const files = Array.from(document.getElementById('photo').files || []);
    if (!files.length) {
      showToast('Please select image(s) to upload', true);
      return;
    }
    const formData = new FormData();
    files.forEach(f => formData.append('photo', f));
    fetch(`${prefix}/api/upload`, {
      method: 'POST',
      headers: { 'Authorization': 'Bearer ' + token },
      body: formData
    })
      .then(response => response.json().then(body => {
        if (!response.ok) {
          throw body;
        }
        return body;
      }))
      .then(result => {
        sessionStorage.setItem('uploadToken', token);
        const uploaded = (result.items || []).length;
        const failed = (result.errors || []).length;
        showToast(failed ? `Uploaded ${uploaded}, ${failed} failed` : `Uploaded ${uploaded}`);
        closeModalFunc();
        loadGallery();
      })
      .catch(error => {
        const first = error && error.errors && error.errors[0];
        showToast((error && error.error) || (first && first.error) || 'Upload failed', true);
      });
  });

  closeImageModal.addEventListener('click', closeImageModalFunc);
  imageModal.addEventListener('click', e => {
    if (e.target === imageModal) {
      closeImageModalFunc();
    }
  });

  document.addEventListener('keydown', event => {
    if (event.key === 'Escape') {
      if (imageModal.getAttribute('aria-hidden') === 'false') {
        event.preventDefault();
        closeImageModalFunc();
      } else if (modalEl.getAttribute('aria-hidden') === 'false') {
        event.preventDefault();
        closeModalFunc();
      }
    } else if ((event.key === 'u' || event.key === 'U') && modalEl.getAttribute('aria-hidden') === 'true'
               && !['INPUT', 'TEXTAREA'].includes(document.activeElement.tagName)) {
      event.preventDefault();
      openModal();
    }
  });

  loadGallery();
});
"""


def ensure_assets(templates_dir: Optional[Path] = None, static_dir: Optional[Path] = None) -> None:
    """Create templates/static on first run so the app is standalone."""
    APP_DIR = Path(__file__).resolve().parent
    TEMPLATES_DIR = templates_dir or APP_DIR / "templates"
    STATIC_DIR = static_dir or APP_DIR / "static"

    TEMPLATES_DIR.mkdir(parents=True, exist_ok=True)
    STATIC_DIR.mkdir(parents=True, exist_ok=True)
    files = {
        TEMPLATES_DIR / "index.html": INDEX_HTML,
        STATIC_DIR / "app.css": APP_CSS,
        STATIC_DIR / "script.js": SCRIPT_JS,
    }
    for p, content in files.items():
        if not p.exists():
            p.write_text(content, encoding="utf-8")

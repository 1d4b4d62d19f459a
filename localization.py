# Localization for Kantin Bot

from __future__ import annotations

from logging_config import logger

DEFAULT_LANGUAGE = "id"

LANGUAGES = {"id": "🇮🇩 Bahasa Indonesia", "en": "🇬🇧 English"}

TEXTS = {
    "id": {
        # Greeting
        "choose_language": "🌍 Pilih bahasa / Choose language",
        "language_changed": "✅ Bahasa diubah ke Bahasa Indonesia",
        "welcome": """🍽 <b>Kantin — pesan makanan dari kantin favoritmu</b>

Pilih restoran, masukkan menu ke keranjang,
lalu konfirmasi pembayaran dengan bukti transfer.""",
        "welcome_back": "👋 <b>Halo, {name}!</b>",
        "main_menu": "🏠 Menu utama",
        "help_text": """ℹ️ <b>Bantuan</b>

/start — menu utama
/login — masuk dengan email dan kata sandi
/logout — keluar
/cart — keranjang
/orders — riwayat pesanan
/payments — verifikasi pembayaran (admin)
/language — ganti bahasa""",
        # Main menu buttons
        "btn_restaurants": "🍽 Restoran",
        "btn_cart": "🛒 Keranjang",
        "btn_orders": "📋 Pesanan saya",
        "btn_pay_now": "💳 Bayar sekarang",
        "btn_login": "🔑 Masuk",
        "btn_logout": "🚪 Keluar",
        "btn_admin_payments": "🧾 Verifikasi pembayaran",
        "btn_language": "🌍 Bahasa",
        "cancel": "❌ Batal",
        "back": "⬅️ Kembali",
        "btn_skip": "⏭ Lewati",
        "cancelled": "Dibatalkan",
        "page": "Halaman {page}/{pages}",
        # Auth
        "login_prompt_email": "📧 Masukkan email akun Kantin kamu:",
        "login_prompt_password": "🔒 Masukkan kata sandi:",
        "login_invalid_email": "⚠️ Format email tidak valid, coba lagi.",
        "login_success": "✅ Berhasil masuk sebagai <b>{name}</b>",
        "login_failed": "❌ Gagal masuk: {error}",
        "logout_done": "👋 Kamu sudah keluar.",
        "login_required": "🔑 Silakan login terlebih dahulu",
        "session_expired": "⌛ Sesi berakhir, silakan login kembali",
        "already_logged_in": "Kamu sudah masuk sebagai <b>{name}</b>",
        "not_staff": "⛔ Halaman ini khusus admin",
        # Restaurants and menus
        "restaurants_title": "🍽 <b>Daftar restoran</b>",
        "restaurants_empty": "Belum ada restoran.",
        "restaurant_closed": "🔒 Tutup",
        "restaurant_header": "🍽 <b>{name}</b>\n📍 {address}\n\n{description}",
        "menu_empty": "Menu belum tersedia.",
        "menu_unavailable": "Menu ini sedang tidak tersedia",
        "menu_item_dialog": """🍲 <b>{name}</b>
💰 {price}

Jumlah: <b>{quantity}</b>
Subtotal: <b>{subtotal}</b>
📝 Catatan: {notes}""",
        "no_notes": "—",
        "btn_add_to_cart": "🛒 Tambah ke keranjang",
        "btn_item_notes": "📝 Catatan",
        "btn_close": "✖️ Tutup",
        "item_notes_prompt": "📝 Tulis catatan untuk menu ini (maks. {limit} karakter):",
        "item_added": "✅ {name} x{quantity} masuk keranjang",
        # Cart
        "cart_title": "🛒 <b>Keranjang</b>",
        "cart_empty": "🛒 Keranjang kosong\n\nTambahkan menu dari restoran!",
        "cart_restaurant_header": "\n🏪 <b>{name}</b>",
        "cart_item_line": "• {name}\n   {quantity} × {price} = <b>{subtotal}</b>",
        "cart_item_notes": "   📝 {notes}",
        "cart_total": "💵 <b>TOTAL: {total}</b> ({count} item)",
        "btn_clear_cart": "🗑 Kosongkan",
        "clear_confirm_text": "⚠️ Hapus semua item dari keranjang?",
        "btn_clear_yes": "✅ Ya, kosongkan",
        "btn_clear_no": "↩️ Tidak",
        "cart_cleared": "🗑 Keranjang dikosongkan",
        "btn_checkout": "✅ Checkout",
        "cart_notes_prompt": "📝 Tulis catatan untuk <b>{name}</b> (maks. {limit} karakter, kirim \"-\" untuk menghapus):",
        "notes_saved": "📝 Catatan disimpan",
        "item_removed": "🗑 Item dihapus",
        "checkout_notes_prompt": "📝 Ada catatan untuk pesanan ini? Tulis di sini atau tekan Lewati.",
        "checkout_success": "✅ Pesanan dibuat! Lanjutkan ke pembayaran.",
        # Checkout confirmation
        "checkout_title": "💳 <b>Konfirmasi pembayaran</b>\nKode pesanan: <code>{code}</code>",
        "checkout_group_header": "\n🏪 <b>{name}</b>",
        "checkout_item_line": "• {name} x{quantity} — {subtotal}",
        "checkout_total": "\n💵 <b>Total: {total}</b>",
        "payment_method_title": "\nMetode pembayaran: <b>{method}</b>",
        "payment_instructions_qris": "📱 Scan QRIS berikut lalu upload bukti pembayaran:\n<code>{payload}</code>",
        "payment_instructions_bank": "🏦 Transfer ke rekening bank:\n{bank}\nNo. rekening: <code>{account}</code>\nAtas nama: {name}",
        "proof_status_missing": "📎 Bukti pembayaran: belum ada",
        "proof_status_attached": "📎 Bukti pembayaran: {filename} ({size})",
        "pay_notes_line": "📝 Catatan: {notes}",
        "btn_attach_proof": "📎 Upload bukti",
        "btn_pay_notes": "📝 Catatan",
        "btn_submit_payment": "✅ Konfirmasi pembayaran",
        "btn_cancel_order": "🚫 Batalkan pesanan",
        "cancel_order_confirm": "⚠️ Yakin ingin membatalkan pesanan ini?",
        "btn_cancel_order_yes": "✅ Ya, batalkan",
        "order_canceled": "🚫 Pesanan berhasil dibatalkan",
        "proof_send_photo": "📸 Kirim foto atau file gambar bukti pembayaran (maks. 5MB).",
        "proof_attached": "✅ Bukti pembayaran diterima",
        "pay_notes_prompt": "📝 Tulis catatan untuk admin (maks. {limit} karakter):",
        "payment_submitted": "🎉 Pembayaran berhasil dikonfirmasi!\nNomor Pesanan: <b>{code}</b>\nAdmin akan memverifikasi bukti pembayaranmu.",
        "btn_view_orders": "📋 Lihat Pesanan Saya",
        "no_payment_waiting": "ℹ️ Tidak ada pembayaran yang menunggu untuk pesanan ini.",
        "submitting": "⏳ Mengirim...",
        # Orders
        "orders_title": "📋 <b>Pesanan saya</b>",
        "orders_empty": "Belum ada pesanan.",
        "order_line": "{badge} #{code} — {total}",
        "order_detail": """📋 <b>Pesanan #{code}</b>
Status: {status}
Tanggal: {date}""",
        "order_notes": "📝 {notes}",
        "btn_pay": "💳 Bayar",
        "status_pending": "⏳ Menunggu pembayaran",
        "status_processing": "👨‍🍳 Diproses",
        "status_paid": "💰 Dibayar",
        "status_completed": "✅ Selesai",
        "status_canceled": "🚫 Dibatalkan",
        # Admin
        "admin_payments_title": "🧾 <b>Pembayaran menunggu verifikasi</b>",
        "admin_payments_empty": "Tidak ada pembayaran yang menunggu.",
        "admin_payment_line": "#{id} · {code} · {method}",
        "admin_payment_detail": """🧾 <b>Pembayaran #{id}</b>
Pesanan: {code}
Total: {total}
Metode: {method}
Status: {status}
Dibayar: {paid_at}""",
        "btn_confirm_payment": "✅ Terima",
        "btn_reject_payment": "❌ Tolak",
        "payment_confirmed": "✅ Pembayaran #{id} diterima",
        "payment_rejected": "❌ Pembayaran #{id} ditolak",
        "payment_already_processed": "ℹ️ Pembayaran ini sudah diproses ({status})",
        "payment_not_found": "❌ Pembayaran tidak ditemukan",
        "payment_processing_error": "❌ Gagal memproses pembayaran",
        "payment_status_pending": "⏳ Menunggu",
        "payment_status_completed": "✅ Diterima",
        "payment_status_rejected": "❌ Ditolak",
        "method_qris": "QRIS",
        "method_bank_transfer": "Transfer bank",
        "method_credit_card": "Kartu kredit",
        "method_e_wallet": "E-wallet",
        # Errors
        "error_generic": "❌ Terjadi kesalahan",
        "api_unavailable": "📡 Server tidak dapat dihubungi, coba lagi nanti",
        "api_error": "❌ {error}",
        "not_found": "❌ Data tidak ditemukan",
        "cart_empty_checkout": "🛒 Keranjang kosong, tidak ada yang bisa di-checkout",
        "proof_required": "📎 Silakan upload bukti transfer",
        "proof_too_large": "⚠️ Ukuran file maksimal 5MB",
        "notes_too_long": "⚠️ Catatan maksimal {limit} karakter",
        "clear_confirm_required": "⚠️ Konfirmasi dulu sebelum mengosongkan keranjang",
        "invalid_payment_method": "⚠️ Metode pembayaran tidak didukung",
        "flow_state_error": "⚠️ Aksi tidak tersedia saat ini",
        "quantity_invalid": "⚠️ Jumlah minimal 1",
    },
    "en": {
        # Greeting
        "choose_language": "🌍 Pilih bahasa / Choose language",
        "language_changed": "✅ Language changed to English",
        "welcome": """🍽 <b>Kantin — order food from your favourite canteen</b>

Pick a restaurant, put menus in your cart,
then confirm payment with a proof of transfer.""",
        "welcome_back": "👋 <b>Hi, {name}!</b>",
        "main_menu": "🏠 Main menu",
        "help_text": """ℹ️ <b>Help</b>

/start — main menu
/login — sign in with email and password
/logout — sign out
/cart — cart
/orders — order history
/payments — verify payments (admin)
/language — change language""",
        # Main menu buttons
        "btn_restaurants": "🍽 Restaurants",
        "btn_cart": "🛒 Cart",
        "btn_orders": "📋 My orders",
        "btn_pay_now": "💳 Pay now",
        "btn_login": "🔑 Log in",
        "btn_logout": "🚪 Log out",
        "btn_admin_payments": "🧾 Verify payments",
        "btn_language": "🌍 Language",
        "cancel": "❌ Cancel",
        "back": "⬅️ Back",
        "btn_skip": "⏭ Skip",
        "cancelled": "Cancelled",
        "page": "Page {page}/{pages}",
        # Auth
        "login_prompt_email": "📧 Enter your Kantin account email:",
        "login_prompt_password": "🔒 Enter your password:",
        "login_invalid_email": "⚠️ That email does not look valid, try again.",
        "login_success": "✅ Signed in as <b>{name}</b>",
        "login_failed": "❌ Login failed: {error}",
        "logout_done": "👋 You are signed out.",
        "login_required": "🔑 Please log in first",
        "session_expired": "⌛ Your session expired, please log in again",
        "already_logged_in": "You are signed in as <b>{name}</b>",
        "not_staff": "⛔ This page is for admins only",
        # Restaurants and menus
        "restaurants_title": "🍽 <b>Restaurants</b>",
        "restaurants_empty": "No restaurants yet.",
        "restaurant_closed": "🔒 Closed",
        "restaurant_header": "🍽 <b>{name}</b>\n📍 {address}\n\n{description}",
        "menu_empty": "No menus yet.",
        "menu_unavailable": "This menu is not available right now",
        "menu_item_dialog": """🍲 <b>{name}</b>
💰 {price}

Quantity: <b>{quantity}</b>
Subtotal: <b>{subtotal}</b>
📝 Notes: {notes}""",
        "no_notes": "—",
        "btn_add_to_cart": "🛒 Add to cart",
        "btn_item_notes": "📝 Notes",
        "btn_close": "✖️ Close",
        "item_notes_prompt": "📝 Write a note for this menu (max {limit} characters):",
        "item_added": "✅ {name} x{quantity} added to cart",
        # Cart
        "cart_title": "🛒 <b>Cart</b>",
        "cart_empty": "🛒 Your cart is empty\n\nAdd menus from a restaurant!",
        "cart_restaurant_header": "\n🏪 <b>{name}</b>",
        "cart_item_line": "• {name}\n   {quantity} × {price} = <b>{subtotal}</b>",
        "cart_item_notes": "   📝 {notes}",
        "cart_total": "💵 <b>TOTAL: {total}</b> ({count} items)",
        "btn_clear_cart": "🗑 Clear",
        "clear_confirm_text": "⚠️ Remove every item from your cart?",
        "btn_clear_yes": "✅ Yes, clear",
        "btn_clear_no": "↩️ No",
        "cart_cleared": "🗑 Cart cleared",
        "btn_checkout": "✅ Checkout",
        "cart_notes_prompt": "📝 Write a note for <b>{name}</b> (max {limit} characters, send \"-\" to remove it):",
        "notes_saved": "📝 Notes saved",
        "item_removed": "🗑 Item removed",
        "checkout_notes_prompt": "📝 Any notes for this order? Type them or press Skip.",
        "checkout_success": "✅ Order created! Continue to payment.",
        # Checkout confirmation
        "checkout_title": "💳 <b>Payment confirmation</b>\nOrder code: <code>{code}</code>",
        "checkout_group_header": "\n🏪 <b>{name}</b>",
        "checkout_item_line": "• {name} x{quantity} — {subtotal}",
        "checkout_total": "\n💵 <b>Total: {total}</b>",
        "payment_method_title": "\nPayment method: <b>{method}</b>",
        "payment_instructions_qris": "📱 Scan this QRIS, then upload your proof of payment:\n<code>{payload}</code>",
        "payment_instructions_bank": "🏦 Transfer to bank account:\n{bank}\nAccount no.: <code>{account}</code>\nAccount name: {name}",
        "proof_status_missing": "📎 Proof of payment: none yet",
        "proof_status_attached": "📎 Proof of payment: {filename} ({size})",
        "pay_notes_line": "📝 Notes: {notes}",
        "btn_attach_proof": "📎 Upload proof",
        "btn_pay_notes": "📝 Notes",
        "btn_submit_payment": "✅ Confirm payment",
        "btn_cancel_order": "🚫 Cancel order",
        "cancel_order_confirm": "⚠️ Do you really want to cancel this order?",
        "btn_cancel_order_yes": "✅ Yes, cancel",
        "order_canceled": "🚫 Order canceled",
        "proof_send_photo": "📸 Send a photo or image file of your proof of payment (max 5MB).",
        "proof_attached": "✅ Proof of payment received",
        "pay_notes_prompt": "📝 Write a note for the admin (max {limit} characters):",
        "payment_submitted": "🎉 Payment confirmed!\nOrder number: <b>{code}</b>\nAn admin will verify your proof of payment.",
        "btn_view_orders": "📋 View my orders",
        "no_payment_waiting": "ℹ️ There is no payment waiting for this order.",
        "submitting": "⏳ Sending...",
        # Orders
        "orders_title": "📋 <b>My orders</b>",
        "orders_empty": "No orders yet.",
        "order_line": "{badge} #{code} — {total}",
        "order_detail": """📋 <b>Order #{code}</b>
Status: {status}
Date: {date}""",
        "order_notes": "📝 {notes}",
        "btn_pay": "💳 Pay",
        "status_pending": "⏳ Awaiting payment",
        "status_processing": "👨‍🍳 Processing",
        "status_paid": "💰 Paid",
        "status_completed": "✅ Completed",
        "status_canceled": "🚫 Canceled",
        # Admin
        "admin_payments_title": "🧾 <b>Payments awaiting verification</b>",
        "admin_payments_empty": "No payments waiting.",
        "admin_payment_line": "#{id} · {code} · {method}",
        "admin_payment_detail": """🧾 <b>Payment #{id}</b>
Order: {code}
Total: {total}
Method: {method}
Status: {status}
Paid at: {paid_at}""",
        "btn_confirm_payment": "✅ Accept",
        "btn_reject_payment": "❌ Reject",
        "payment_confirmed": "✅ Payment #{id} accepted",
        "payment_rejected": "❌ Payment #{id} rejected",
        "payment_already_processed": "ℹ️ This payment was already processed ({status})",
        "payment_not_found": "❌ Payment not found",
        "payment_processing_error": "❌ Could not process the payment",
        "payment_status_pending": "⏳ Pending",
        "payment_status_completed": "✅ Accepted",
        "payment_status_rejected": "❌ Rejected",
        "method_qris": "QRIS",
        "method_bank_transfer": "Bank transfer",
        "method_credit_card": "Credit card",
        "method_e_wallet": "E-wallet",
        # Errors
        "error_generic": "❌ Something went wrong",
        "api_unavailable": "📡 Cannot reach the server, try again later",
        "api_error": "❌ {error}",
        "not_found": "❌ Not found",
        "cart_empty_checkout": "🛒 Your cart is empty, nothing to check out",
        "proof_required": "📎 Please upload your proof of transfer",
        "proof_too_large": "⚠️ Maximum file size is 5MB",
        "notes_too_long": "⚠️ Notes can be at most {limit} characters",
        "clear_confirm_required": "⚠️ Confirm before clearing the cart",
        "invalid_payment_method": "⚠️ Unsupported payment method",
        "flow_state_error": "⚠️ That action is not available right now",
        "quantity_invalid": "⚠️ Quantity must be at least 1",
    },
}


def normalize_language(lang: str | None) -> str:
    return lang if lang in TEXTS else DEFAULT_LANGUAGE


def get_text(lang: str, key: str, **kwargs: object) -> str:
    """Get a text in the requested language, formatted with ``kwargs``.

    Args:
        lang: Language code ('id' or 'en')
        key: Key in TEXTS
        **kwargs: Format parameters

    Returns:
        The formatted text; falls back to Indonesian, then to the key itself.
    """
    texts = TEXTS.get(normalize_language(lang), {})
    text = texts.get(key)
    if text is None:
        text = TEXTS[DEFAULT_LANGUAGE].get(key, key)

    if kwargs and text != key:
        try:
            return text.format(**kwargs)
        except (KeyError, ValueError, IndexError) as e:
            logger.warning("Format error in get_text: %s, key=%s, lang=%s", e, key, lang)
            return text
    return text


def get_language_name(lang: str) -> str:
    return LANGUAGES.get(lang, LANGUAGES[DEFAULT_LANGUAGE])


def get_all_texts(key: str) -> set[str]:
    """Every translation of ``key``; used to match reply keyboard buttons."""
    return {texts[key] for texts in TEXTS.values() if key in texts}
